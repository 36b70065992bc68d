"""
Application use cases.

HTTP handlers and CLI commands call functions from here; each takes an open
session from the Unit of Work and an explicit identity where one applies.
"""
