"""
Media Transfer Layer.

This package streams remote files straight to disk.
"""

from .downloader import Downloader, close_connection_pool, get_connection_pool

__all__ = ["Downloader", "close_connection_pool", "get_connection_pool"]
