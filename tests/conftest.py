"""Test configuration and fixtures"""

import asyncio
from pathlib import Path

import pytest

from melody_fetcher.core.fetcher import MediaFetcher
from melody_fetcher.models.config import FetcherConfig
from melody_fetcher.resolver.process import CommandResult


class FakeDownloader:
    """Records calls and optionally writes a byte to the destination."""

    def __init__(self, succeed: bool = True, write_file: bool = True):
        self.succeed = succeed
        self.write_file = write_file
        self.calls: list[tuple[str, Path]] = []

    async def download(self, url, destination_path) -> bool:
        self.calls.append((url, Path(destination_path)))
        if self.write_file:
            Path(destination_path).write_bytes(b"\x00")
        return self.succeed


class FakeResolver:
    """Returns canned results per mode and records every invocation."""

    def __init__(self):
        self.fetch_result = CommandResult(0, "")
        self.metadata_result = CommandResult(0, "{}")
        self.search_result = CommandResult(0, "[]")
        self.write_file = True
        self.calls: list[tuple[str, dict]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url, out_path, add_media_tag=False):
        self.calls.append(
            ("fetch", {"url": url, "out_path": out_path, "add_media_tag": add_media_tag})
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        if self.write_file and self.fetch_result.exit_code == 0:
            Path(out_path).write_bytes(b"ID3")
        self.in_flight -= 1
        return self.fetch_result

    async def metadata(self, url):
        self.calls.append(("metadata", {"url": url}))
        return self.metadata_result

    async def search(self, sources, keyword=None, song_name=None, artist=None, album=None):
        self.calls.append(
            (
                "search",
                {
                    "sources": list(sources),
                    "keyword": keyword,
                    "song_name": song_name,
                    "artist": artist,
                    "album": album,
                },
            )
        )
        return self.search_result


class StaticConfigProvider:
    def __init__(self, sources=None):
        self.config = FetcherConfig(sources=sources or ["netease", "qq"])

    def get_global_config(self) -> FetcherConfig:
        return self.config


@pytest.fixture
def scratch_dir(tmp_path):
    """Scratch root that does not exist yet"""
    return tmp_path / "melody-tmp-songs"


@pytest.fixture
def fake_downloader():
    return FakeDownloader()


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
def config_provider():
    return StaticConfigProvider()


@pytest.fixture
def fetcher(scratch_dir, fake_resolver, fake_downloader, config_provider):
    return MediaFetcher(
        scratch_root=scratch_dir,
        resolver=fake_resolver,
        downloader=fake_downloader,
        config_provider=config_provider,
    )
