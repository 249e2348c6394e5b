"""blogsite: content store and style layer for a personal blog."""

__version__ = "0.1.0"
