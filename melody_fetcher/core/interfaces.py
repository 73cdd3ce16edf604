"""
Collaborator contracts the fetch orchestrator depends on.

Production code satisfies them with `Downloader`, `MediaGetResolver` and
`ConfigManager`; tests substitute in-process doubles.
"""

import os
from typing import Protocol, Sequence

from melody_fetcher.models.config import FetcherConfig
from melody_fetcher.resolver.process import CommandResult


class FileDownloader(Protocol):
    async def download(self, url: str, destination_path: str | os.PathLike) -> bool:
        ...


class Resolver(Protocol):
    async def fetch(
        self, url: str, out_path: str, add_media_tag: bool = False
    ) -> CommandResult:
        ...

    async def metadata(self, url: str) -> CommandResult:
        ...

    async def search(
        self,
        sources: Sequence[str],
        keyword: str | None = None,
        song_name: str | None = None,
        artist: str | None = None,
        album: str | None = None,
    ) -> CommandResult:
        ...


class ConfigProvider(Protocol):
    def get_global_config(self) -> FetcherConfig:
        ...
