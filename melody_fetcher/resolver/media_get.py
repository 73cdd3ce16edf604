"""
Thin wrapper around the media-get command line.

Each method maps to one CLI mode and builds its exact argument vector. The
arguments are handed to the process runner as a vector, never through a
shell, so values are passed without extra quoting.
"""

import logging
import os
import shlex
import shutil
from typing import Sequence

from melody_fetcher.resolver.process import CommandResult, ProcessRunner

log = logging.getLogger(__name__)


def find_binary(resolver_path: str) -> str:
    """
    Resolves the configured resolver location. A bare command name is looked
    up on PATH; anything containing a directory separator is used as given.
    """
    if os.path.dirname(resolver_path):
        return os.path.expanduser(resolver_path)
    return shutil.which(resolver_path) or resolver_path


class MediaGetResolver:
    """Invokes media-get in download, metadata or search mode."""

    def __init__(self, binary_path: str, runner: ProcessRunner | None = None):
        self.binary_path = binary_path
        self._runner = runner or ProcessRunner()

    @staticmethod
    def build_fetch_args(url: str, out_path: str, add_media_tag: bool) -> list[str]:
        args = ["-u", url, "--out", out_path, "-t", "audio"]
        if add_media_tag:
            args.append("--addMediaTag")
        return args

    @staticmethod
    def build_metadata_args(url: str) -> list[str]:
        return ["-u", url, "-m", "--infoFormat=json", "-l=silence"]

    @staticmethod
    def build_search_args(
        sources: Sequence[str],
        keyword: str | None = None,
        song_name: str | None = None,
        artist: str | None = None,
        album: str | None = None,
    ) -> list[str]:
        if keyword:
            args = ["-k", keyword]
        else:
            args = [
                "--searchSongName",
                song_name or "",
                "--searchArtist",
                artist or "",
                "--searchAlbum",
                album or "",
            ]
        return args + [
            "--searchType=song",
            "-m",
            f"--sources={','.join(sources)}",
            "--infoFormat=json",
            "-l",
            "silence",
        ]

    async def fetch(
        self, url: str, out_path: str, add_media_tag: bool = False
    ) -> CommandResult:
        """Downloads the audio behind `url` to `out_path`."""
        return await self._invoke(self.build_fetch_args(url, out_path, add_media_tag))

    async def metadata(self, url: str) -> CommandResult:
        """Prints the metadata of `url` as a JSON object."""
        return await self._invoke(self.build_metadata_args(url))

    async def search(
        self,
        sources: Sequence[str],
        keyword: str | None = None,
        song_name: str | None = None,
        artist: str | None = None,
        album: str | None = None,
    ) -> CommandResult:
        """Prints ranked search hits across `sources` as a JSON array."""
        return await self._invoke(
            self.build_search_args(sources, keyword, song_name, artist, album)
        )

    async def _invoke(self, args: list[str]) -> CommandResult:
        log.info(f"cmd: {shlex.join([self.binary_path, *args])}")
        return await self._runner.run(self.binary_path, args)
