#!/usr/bin/env python3
"""
CLI entry point for miniflix.cli module.

This allows running: python -m miniflix.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
