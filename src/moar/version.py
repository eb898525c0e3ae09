"""Version information for moar."""

__version__ = "1.23.0"
