"""
Core fetch engine.

`MediaFetcher` turns requests into local files or normalized records,
delegating the actual work to the resolver and downloader it is given.
"""

from .fetcher import MediaFetcher

__all__ = ["MediaFetcher"]
