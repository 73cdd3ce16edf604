"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import os
import tempfile

from pydantic import BaseModel, Field, field_validator

DEFAULT_SOURCES = [
    "bilibili",
    "douyin",
    "kugou",
    "kuwo",
    "migu",
    "netease",
    "qq",
    "youtube",
]

DEFAULT_RESOLVER_PATH = "media-get"

SCRATCH_DIR_NAME = "melody-tmp-songs"


def default_scratch_dir() -> str:
    """Returns the fixed scratch directory under the system temp directory."""
    return os.path.join(tempfile.gettempdir(), SCRATCH_DIR_NAME)


class FetcherConfig(BaseModel):
    """A validated configuration model for the application."""

    # Search
    sources: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCES))

    # Resolver binary
    resolver_path: str = DEFAULT_RESOLVER_PATH
    # media-get panics now and then when asked to write tags, so tagging stays
    # off unless explicitly enabled.
    allow_media_tag: bool = False

    # Artifacts
    scratch_dir: str = Field(default_factory=default_scratch_dir)
    reuse_artifacts: bool = False
    max_connections: int = 8

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("sources")
    @classmethod
    def validate_sources(cls, v: list[str]) -> list[str]:
        """Drops blank entries and ensures at least one platform is enabled."""
        cleaned = [s.strip() for s in v if s and s.strip()]
        if not cleaned:
            raise ValueError("At least one search source must be enabled.")
        if any("," in s for s in cleaned):
            raise ValueError("Source identifiers cannot contain commas.")
        return cleaned

    @field_validator("resolver_path", "scratch_dir")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Path settings cannot be empty.")
        return v

    @field_validator("max_connections")
    @classmethod
    def validate_connections(cls, v: int) -> int:
        """Ensures a reasonable connection pool size."""
        if v < 1 or v > 32:
            raise ValueError("Max connections must be between 1 and 32.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
