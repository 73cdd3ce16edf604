"""
Deterministic placement of fetched artifacts under a single scratch root.

Every request is reduced to a cache key, an MD5 fingerprint of the request
fields that affect the produced file. The key alone decides where the file
lands, so the same request always resolves to the same location across runs.
"""

import hashlib
import logging
from pathlib import Path

from melody_fetcher.utils.path import create_dir

log = logging.getLogger(__name__)

AUDIO_SUFFIX = ".mp3"


def derive_key(*parts: str) -> str:
    """
    Returns a 32-character hex fingerprint of the concatenated parts.

    MD5 is used for cache addressing only; it is stable across processes and
    needs no seed.
    """
    joined = "".join(parts)
    return hashlib.md5(joined.encode("utf-8")).hexdigest()  # noqa: S324


def resolve_path(root: Path, key: str, suffix: str = "") -> Path:
    """Composes `<root>/<key><suffix>`. Performs no I/O."""
    return Path(root) / f"{key}{suffix}"


class ScratchRoot:
    """
    The directory all artifacts are written under.

    The directory is created once, when the instance is constructed, and is
    never cleaned up here.
    """

    def __init__(self, root_path: Path | str):
        self.path = Path(root_path)
        create_dir(self.path)
        log.info(f"[tmp path] use {self.path}")

    def file_for(self, key: str, suffix: str = AUDIO_SUFFIX) -> Path:
        """Flat artifact location used for direct downloads."""
        return resolve_path(self.path, key, suffix)

    def dir_for(self, key: str) -> Path:
        """Per-request subdirectory used for resolver-mediated fetches."""
        return resolve_path(self.path, key)

    def __repr__(self) -> str:
        return f"ScratchRoot({str(self.path)!r})"
