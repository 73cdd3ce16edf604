"""
Utilities for handling file paths and names that end up on disk or on the
resolver command line.
"""

import re
from pathlib import Path
from typing import Optional

# Characters that break a path or a resolver argument.
_UNSAFE_NAME_CHARS = re.compile(r'[ ./"]')


def sanitize_song_name(song_name: Optional[str]) -> str:
    """
    Strips spaces, dots, slashes and double quotes from a display name so it
    can be used as a file name and inside a resolver argument. Every other
    character is kept, since the result is also part of the cache key.
    """
    if not song_name:
        return ""
    return _UNSAFE_NAME_CHARS.sub("", song_name)


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
