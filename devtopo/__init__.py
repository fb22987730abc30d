"""devtopo — topology transformation for local multi-service development."""

__version__ = "0.1.0"
