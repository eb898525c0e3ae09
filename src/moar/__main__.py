"""
Main entry point for moar.

This module allows moar to be run as:
    python -m moar
"""

from .cli import main

if __name__ == "__main__":
    main()
