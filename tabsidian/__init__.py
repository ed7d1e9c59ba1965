"""Export open browser tabs into Markdown notes."""

__version__ = "1.0.0"
