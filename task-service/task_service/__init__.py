"""Task Service: JSON HTTP API for task records kept in Redis."""

__version__ = "1.0.0"
