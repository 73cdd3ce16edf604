"""
Handles the low-level downloading of files over HTTP, streaming straight to
the destination path.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(max_connections: int = 8) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run.

    Args:
        max_connections: Maximum concurrent connections per host.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=max_connections * 2,
            limit_per_host=max_connections,
            ttl_dns_cache=600,  # 10 minutes
            keepalive_timeout=30,
            enable_cleanup_closed=True,
            force_close=False,
        )
        # No total timeout: a large file may legitimately take a long time.
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={
                "Accept-Encoding": "gzip, deflate, br",
            },
        )
        log.debug(f"Created download pool with limit_per_host={max_connections}")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """
    A single-attempt file downloader.

    Failures are reported through the return value; a failed download never
    leaves a partial file behind.
    """

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(
        self,
        max_connections: int = 8,
        session: aiohttp.ClientSession | None = None,
    ):
        self.max_connections = max_connections
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None:
            return self._session
        return await get_connection_pool(self.max_connections)

    async def download(self, url: str, destination_path: str | os.PathLike) -> bool:
        """
        Streams `url` to `destination_path`.

        Returns:
            True if the whole body was written, False otherwise.
        """
        destination = os.fspath(destination_path)
        try:
            session = await self._get_session()
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                bytes_downloaded = 0
                async with aiofiles.open(destination, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
            log.debug(
                f"Downloaded {bytes_downloaded} bytes to "
                f"'{os.path.basename(destination)}'"
            )
            return True
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            log.error(
                f"Download of '{url}' to '{os.path.basename(destination)}' failed: {e}"
            )
            await self._discard_partial(destination)
            return False

    @staticmethod
    async def _discard_partial(destination: str) -> None:
        try:
            await asyncio.to_thread(os.remove, destination)
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning(f"Could not remove partial file '{destination}': {e}")
