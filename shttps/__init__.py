"""Helpers for HTTP server scripts: file system, JSON tables, configuration, HTTP client."""

__version__ = "0.1.0"