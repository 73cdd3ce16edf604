"""
The fetch orchestrator: turns a request into a file on disk or a normalized
record by driving the downloader or the media-get resolver.
"""

import asyncio
import logging
import os
from collections import OrderedDict
from pathlib import Path

from melody_fetcher.core.interfaces import ConfigProvider, FileDownloader, Resolver
from melody_fetcher.core.normalizer import normalize_metadata, normalize_search_results
from melody_fetcher.exceptions import (
    ArtifactMissingError,
    MalformedOutputError,
    MelodyFetcherError,
)
from melody_fetcher.media.downloader import Downloader
from melody_fetcher.models.config import FetcherConfig
from melody_fetcher.models.requests import (
    DirectUrl,
    FetchRequest,
    MetadataQuery,
    ResolvedFetch,
    SearchQuery,
)
from melody_fetcher.models.track import SearchResult, TrackMetadata
from melody_fetcher.resolver.media_get import MediaGetResolver, find_binary
from melody_fetcher.storage.cache import AUDIO_SUFFIX, ScratchRoot, derive_key
from melody_fetcher.utils.path import create_dir, sanitize_song_name

log = logging.getLogger(__name__)


class MediaFetcher:
    """
    Orchestrates the four fetch modes: direct download, resolver-mediated
    download, metadata query and multi-platform search.

    Every operation returns None on failure. The reason (exit code, captured
    output, exception) is logged and never returned to the caller, and nothing
    is retried.
    """

    def __init__(
        self,
        scratch_root: Path | str,
        resolver: Resolver,
        downloader: FileDownloader,
        config_provider: ConfigProvider,
        allow_media_tag: bool = False,
        reuse_artifacts: bool = False,
    ):
        """
        Args:
            scratch_root: Directory all artifacts are written under. Created
                here if it does not exist.
            resolver: The media-get capability.
            downloader: Streams plain URLs to disk.
            config_provider: Supplies the enabled search sources at call time.
            allow_media_tag: Whether `--addMediaTag` may be forwarded to the
                resolver. Off by default while media-get can panic when tagging.
            reuse_artifacts: Return an artifact already present at the computed
                location instead of producing it again.
        """
        self.scratch_root = ScratchRoot(scratch_root)
        self.resolver = resolver
        self.downloader = downloader
        self.config_provider = config_provider
        self.allow_media_tag = allow_media_tag
        self.reuse_artifacts = reuse_artifacts
        self._key_locks: OrderedDict[str, asyncio.Lock] = OrderedDict()
        self._max_locks = 1000
        self._key_lock_main = asyncio.Lock()

    @classmethod
    def from_config(
        cls, config: FetcherConfig, config_provider: ConfigProvider
    ) -> "MediaFetcher":
        """Builds a fetcher wired to the real media-get binary and HTTP downloader."""
        return cls(
            scratch_root=config.scratch_dir,
            resolver=MediaGetResolver(find_binary(config.resolver_path)),
            downloader=Downloader(max_connections=config.max_connections),
            config_provider=config_provider,
            allow_media_tag=config.allow_media_tag,
            reuse_artifacts=config.reuse_artifacts,
        )

    async def _get_key_lock(self, key: str) -> asyncio.Lock:
        """Gets or creates the lock serializing work on one cache key."""
        async with self._key_lock_main:
            if key in self._key_locks:
                self._key_locks.move_to_end(key)
                return self._key_locks[key]

            lock = asyncio.Lock()
            self._key_locks[key] = lock

            if len(self._key_locks) > self._max_locks:
                self._evict_idle_lock()

            return lock

    def _evict_idle_lock(self) -> None:
        """Drops the least recently used lock that nobody currently holds."""
        for key, lock in self._key_locks.items():
            if not lock.locked():
                del self._key_locks[key]
                return

    @staticmethod
    async def _artifact_exists(path: Path) -> bool:
        return await asyncio.to_thread(os.path.isfile, path)

    async def _ensure_artifact(self, path: Path) -> Path:
        if not await self._artifact_exists(path):
            raise ArtifactMissingError(f"the file not exists {path}")
        return path

    async def fetch(
        self, request: FetchRequest
    ) -> Path | TrackMetadata | list[SearchResult] | None:
        """Dispatches a request variant to the matching operation."""
        if isinstance(request, DirectUrl):
            return await self.download_via_source_url(request.url)
        if isinstance(request, ResolvedFetch):
            return await self.fetch_with_url(
                request.url,
                song_name=request.song_name,
                add_media_tag=request.add_media_tag,
            )
        if isinstance(request, MetadataQuery):
            return await self.get_meta_with_url(request.url)
        if isinstance(request, SearchQuery):
            return await self.search_song_from_all_platforms(
                keyword=request.keyword,
                song_name=request.song_name,
                artist=request.artist,
                album=request.album,
            )
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    async def download_via_source_url(self, url: str) -> Path | None:
        """
        Downloads `url` verbatim to `<root>/<md5(url)>.mp3`.

        Returns:
            The destination path, or None if the download failed or the file
            is missing afterwards.
        """
        log.info(f"downloadViaSourceUrl params: url: {url}")
        request_hash = derive_key(url)
        download_path = self.scratch_root.file_for(request_hash)

        async with await self._get_key_lock(request_hash):
            if self.reuse_artifacts and await self._artifact_exists(download_path):
                log.info(f"reusing existing download, path: {download_path}")
                return download_path

            log.info(f"start download from {url}")
            try:
                if not await self.downloader.download(url, download_path):
                    log.error(f"download failed with {url}")
                    return None
                await self._ensure_artifact(download_path)
            except (MelodyFetcherError, OSError) as e:
                log.error(f"download failed with {url}, {e}")
                return None

        log.info(f"download success, path: {download_path}")
        return download_path

    async def fetch_with_url(
        self, url: str, song_name: str = "", add_media_tag: bool = False
    ) -> Path | None:
        """
        Lets media-get locate and download the audio behind `url`.

        The file lands in `<root>/<key>/<name>.mp3`, where the key covers the
        URL, the sanitized name and the requested tagging flag, and the name
        falls back to the key when no display name is given.
        """
        log.info(
            f"fetchWithUrl params: url: {url}, songName: {song_name}, "
            f"addMediaTag: {add_media_tag}"
        )
        song_name = sanitize_song_name(song_name)
        request_hash = derive_key(url, song_name, "true" if add_media_tag else "false")
        file_base_path = self.scratch_root.dir_for(request_hash)
        try:
            await asyncio.to_thread(create_dir, file_base_path)
        except OSError as e:
            log.error(f"create dir failed: {e}")
            return None

        if add_media_tag and not self.allow_media_tag:
            # TODO: drop this gate once media-get stops panicking on --addMediaTag.
            log.warning("media tagging is disabled, fetching without --addMediaTag")
            add_media_tag = False

        download_path = file_base_path / f"{song_name or request_hash}{AUDIO_SUFFIX}"

        async with await self._get_key_lock(request_hash):
            if self.reuse_artifacts and await self._artifact_exists(download_path):
                log.info(f"reusing existing fetch, path: {download_path}")
                return download_path

            log.info(f"start parse and download from {url}")
            try:
                result = await self.resolver.fetch(
                    url, str(download_path), add_media_tag=add_media_tag
                )
                log.debug(f"resolver exit code {result.exit_code}: {result.output}")
                if result.exit_code != 0:
                    log.error(
                        f"fetchWithUrl failed with {url}, exit code {result.exit_code}"
                    )
                    return None
                await self._ensure_artifact(download_path)
            except MelodyFetcherError as e:
                log.error(f"fetchWithUrl failed with {url}, {e}")
                return None

        log.info(f"fetch success, path: {download_path}")
        return download_path

    async def get_meta_with_url(self, url: str) -> TrackMetadata | None:
        """Asks media-get for the metadata of `url` without downloading it."""
        log.info(f"getMetaWithUrl from {url}")
        try:
            result = await self.resolver.metadata(url)
            log.debug(f"resolver exit code {result.exit_code}")
            if result.exit_code != 0:
                log.error(f"getMetaWithUrl failed with {url}, err: {result.output}")
                return None
            return normalize_metadata(result.output)
        except MalformedOutputError as e:
            log.error(f"{e}\n{e.output}")
            return None
        except MelodyFetcherError as e:
            log.error(f"getMetaWithUrl failed with {url}, {e}")
            return None

    async def search_song_from_all_platforms(
        self,
        keyword: str | None = None,
        song_name: str | None = None,
        artist: str | None = None,
        album: str | None = None,
    ) -> list[SearchResult] | None:
        """
        Searches every enabled platform, by `keyword` if given, otherwise by
        the song/artist/album triple.

        Returns:
            The hits in the resolver's own ranking order (possibly empty), or
            None on failure.
        """
        log.info(
            f"searchSong with keyword: {keyword}, songName: {song_name}, "
            f"artist: {artist}, album: {album}"
        )
        try:
            global_config = self.config_provider.get_global_config()
            result = await self.resolver.search(
                global_config.sources,
                keyword=keyword,
                song_name=song_name,
                artist=artist,
                album=album,
            )
            log.debug(f"resolver exit code {result.exit_code}")
            if result.exit_code != 0:
                log.error(
                    f"searchSong failed with keyword: {keyword}, songName: "
                    f"{song_name}, err: {result.output}"
                )
                return None
            return normalize_search_results(result.output)
        except MalformedOutputError as e:
            log.error(f"{e}\n{e.output}")
            return None
        except MelodyFetcherError as e:
            log.error(f"searchSong failed: {e}")
            return None
