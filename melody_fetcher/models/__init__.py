"""
Data Models Layer.

This package contains the configuration model, the request variants and the
normalized records returned to callers.
"""

from .config import FetcherConfig
from .requests import DirectUrl, FetchRequest, MetadataQuery, ResolvedFetch, SearchQuery
from .track import SearchResult, TrackMetadata

__all__ = [
    "DirectUrl",
    "FetchRequest",
    "FetcherConfig",
    "MetadataQuery",
    "ResolvedFetch",
    "SearchQuery",
    "SearchResult",
    "TrackMetadata",
]
