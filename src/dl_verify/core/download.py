"""Download service for fetching the artifact to verify.

The artifact is streamed to a file inside a caller-owned temporary
directory. Verification happens on that file; nothing is written to the
final destination until every check has passed.
"""

import asyncio
import contextlib
from pathlib import Path
from urllib.parse import unquote, urlparse

import aiofiles
import aiohttp

from dl_verify.constants import (
    DEFAULT_DOWNLOAD_FILENAME,
    DEFAULT_RETRY_ATTEMPTS,
    DOWNLOAD_CHUNK_SIZE,
)
from dl_verify.exceptions import DownloadError
from dl_verify.logger import get_logger

logger = get_logger(__name__)


def get_filename_from_url(url: str) -> str:
    """Extract the file name from a URL, with a fallback for bare paths."""
    name = Path(unquote(urlparse(url).path)).name
    return name or DEFAULT_DOWNLOAD_FILENAME


class DownloadService:
    """Downloads artifacts with retry logic."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        timeout: aiohttp.ClientTimeout | None = None,
    ) -> None:
        """Initialize download service with HTTP session.

        Args:
            session: aiohttp session for downloads
            retry_attempts: Number of attempts before giving up
            timeout: Per-request timeout, defaults to the session's

        """
        self.session = session
        self.retry_attempts = max(1, retry_attempts)
        self.timeout = timeout

    async def download_to_temporary_file(
        self, url: str, directory: Path
    ) -> Path:
        """Download ``url`` into ``directory``.

        Args:
            url: URL to download from
            directory: Existing temporary directory

        Returns:
            Path of the downloaded file

        Raises:
            DownloadError: If download fails after all retry attempts

        """
        dest = directory / get_filename_from_url(url)
        await self.download_file(url, dest)
        return dest

    async def download_file(self, url: str, dest: Path) -> None:
        """Download a file from URL to destination with retry logic.

        Raises:
            DownloadError: If download fails after all retry attempts

        """
        request_kwargs = {"timeout": self.timeout} if self.timeout else {}

        for attempt in range(1, self.retry_attempts + 1):
            try:
                async with self.session.get(
                    url, **request_kwargs
                ) as response:
                    response.raise_for_status()
                    await self._write_response(response, url, dest)
                    return

            except (aiohttp.ClientError, TimeoutError) as e:
                logger.warning(
                    "Attempt %s/%s failed for %s: %s",
                    attempt,
                    self.retry_attempts,
                    url,
                    e,
                )
                self._cleanup(dest)

                if attempt == self.retry_attempts:
                    logger.error(
                        "Download of %s failed after %s attempts",
                        url,
                        self.retry_attempts,
                    )
                    msg = f"failed after {self.retry_attempts} attempts: {e}"
                    raise DownloadError(msg, url) from e

                backoff = 2**attempt
                logger.info("Retrying in %s seconds...", backoff)
                await asyncio.sleep(backoff)
            except OSError as e:
                self._cleanup(dest)
                msg = f"could not write {dest}: {e}"
                raise DownloadError(msg, url) from e

    async def _write_response(
        self, response: aiohttp.ClientResponse, url: str, dest: Path
    ) -> None:
        total = int(response.headers.get("Content-Length", 0))
        logger.info("Downloading %s", url)
        if total > 0:
            logger.debug("   Size: %s bytes", f"{total:,}")
        else:
            logger.debug("   Size: Unknown")

        downloaded = 0
        async with aiofiles.open(dest, mode="wb") as f:
            async for chunk in response.content.iter_chunked(
                DOWNLOAD_CHUNK_SIZE
            ):
                if chunk:
                    await f.write(chunk)
                    downloaded += len(chunk)

        logger.debug("Download completed: %s (%d bytes)", dest, downloaded)

    @staticmethod
    def _cleanup(dest: Path) -> None:
        if dest.exists():
            logger.debug("Removing partial download: %s", dest)
            with contextlib.suppress(OSError):
                dest.unlink()
