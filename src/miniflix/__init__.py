"""MiniFlix - authenticated video streaming with resume tracking."""

__version__ = "0.1.0"
