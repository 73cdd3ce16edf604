"""
Immutable request variants accepted by the fetch orchestrator.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DirectUrl:
    """Download the resource at `url` as-is, without the resolver."""

    url: str


@dataclass(frozen=True)
class ResolvedFetch:
    """Let the resolver locate and download the audio behind `url`."""

    url: str
    song_name: str = ""
    add_media_tag: bool = False


@dataclass(frozen=True)
class MetadataQuery:
    """Ask the resolver for track metadata only."""

    url: str


@dataclass(frozen=True)
class SearchQuery:
    """
    Search every enabled platform, either by free-text `keyword` or by the
    structured song/artist/album triple. A keyword takes precedence.
    """

    keyword: str | None = None
    song_name: str | None = None
    artist: str | None = None
    album: str | None = None

    @property
    def is_keyword(self) -> bool:
        return bool(self.keyword)


FetchRequest = Union[DirectUrl, ResolvedFetch, MetadataQuery, SearchQuery]
