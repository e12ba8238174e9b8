"""t-learn: course content delivery with API key and session token authentication."""

__version__ = "0.1.0"
