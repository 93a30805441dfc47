"""Build-time indexing and client-side style full-text search for static sites."""

__version__ = "0.1.0"
