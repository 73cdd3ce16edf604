"""
Normalized records produced from media-get output.

The resolver names fields differently depending on the mode it runs in:
metadata mode prints snake_case keys, search mode prints PascalCase keys.
Both models read those upstream names through aliases and expose one
internal naming scheme. Unknown keys are ignored, missing keys stay None.

Only the identifying fields (names, source, URL) are type-checked. The rest
are kept exactly as the resolver printed them and vary by platform (a
duration can be `215`, `215.4` or `"3:35"`).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TrackMetadata(BaseModel):
    """Metadata for a single track as reported by `media-get -m`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    song_name: str | None = Field(None, alias="title")
    artist: str | None = None
    album: str | None = None
    duration: Any = None
    cover_url: Any = None
    public_time: Any = None
    is_trial: Any = None
    resource_type: Any = None
    audios: Any = None
    source: str | None = None
    resource_forbidden: Any = None
    from_music_platform: Any = None


class SearchResult(BaseModel):
    """One ranked hit from a multi-platform search."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    song_name: str | None = Field(None, alias="Name")
    artist: str | None = Field(None, alias="Artist")
    album: str | None = Field(None, alias="Album")
    duration: Any = Field(None, alias="Duration")
    url: str | None = Field(None, alias="Url")
    resource_forbidden: Any = Field(None, alias="ResourceForbidden")
    source: str | None = Field(None, alias="Source")
    from_music_platform: Any = Field(None, alias="FromMusicPlatform")
    score: Any = Field(None, alias="Score")
