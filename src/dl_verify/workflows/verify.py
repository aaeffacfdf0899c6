"""Download-and-verify workflow.

Steps, in order:

1. Validate the expected checksums and the GPG key identifier. Both fail
   before any network access.
2. Download the artifact into a private temporary directory.
3. Compute and compare checksums.
4. Resolve the GPG key through the key servers, when one was given.
5. Release the artifact to the destination, only if the checksums
   verified it.

Resolving a key does not by itself make a claim about the artifact, so an
artifact is only released when at least one checksum matched and none
mismatched.
"""

from __future__ import annotations

import asyncio
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO

import orjson

from dl_verify.constants import DEFAULT_TIMEOUT_SECONDS, TEMP_DIR_PREFIX
from dl_verify.core.download import DownloadService
from dl_verify.core.gpg.downloader import KeyDownloader, key_fingerprint
from dl_verify.core.gpg.keys import KeyLength, new_cleaned_key_id
from dl_verify.core.http_session import (
    create_client_timeout,
    create_http_session,
)
from dl_verify.core.output import write_out_file
from dl_verify.core.verification import (
    ChecksumVerifier,
    ExpectedDigestSet,
    VerificationResult,
    validate_expected,
)
from dl_verify.exceptions import OutputError
from dl_verify.logger import get_logger

if TYPE_CHECKING:
    import aiohttp
    import pgpy

    from dl_verify.core.gpg.keys import KeyID
    from dl_verify.core.gpg.keyserver import KeyServerInformation
    from dl_verify.domain.types import GlobalConfig

logger = get_logger(__name__)

# The key lookup deadline covers every candidate server, so it is a
# multiple of the per-request timeout.
KEY_LOOKUP_DEADLINE_FACTOR = 6


@dataclass(slots=True, frozen=True)
class VerifyRequest:
    """What to download and how to verify it."""

    url: str
    checksums: ExpectedDigestSet = field(default_factory=ExpectedDigestSet)
    gpg_key: str | None = None
    min_key_length: KeyLength = KeyLength.FINGERPRINT_V3
    key_server_info: KeyServerInformation | None = None


@dataclass(slots=True)
class VerificationReport:
    """Combined result of a verification run."""

    url: str
    checksums: VerificationResult
    key_id: KeyID | None = None
    key: pgpy.PGPKey | None = None
    bytes_written: int | None = None

    @property
    def verified(self) -> bool:
        """Whether the artifact's integrity was proven."""
        return self.checksums.is_valid

    @property
    def emitted(self) -> bool:
        """Whether the artifact was released to the destination."""
        return self.bytes_written is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the JSON report."""
        key_info: dict[str, Any] | None = None
        if self.key_id is not None:
            key_info = {"requested": str(self.key_id)}
            if self.key is not None:
                key_info["fingerprint"] = key_fingerprint(self.key)
                key_info["user_ids"] = [
                    f"{uid.name} <{uid.email}>" if uid.email else uid.name
                    for uid in self.key.userids
                ]

        return {
            "url": self.url,
            "verified": self.verified,
            "emitted": self.emitted,
            "bytes_written": self.bytes_written,
            "checksums": self.checksums.to_dict(),
            "gpg_key": key_info,
        }

    def to_json(self) -> bytes:
        """Serialize the report as indented JSON."""
        return orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2)


class VerifyWorkflow:
    """Runs the download, verification and release of one artifact."""

    def __init__(self, global_config: GlobalConfig) -> None:
        """Initialize workflow with the loaded configuration."""
        self.global_config = global_config
        network = global_config.get("network", {})
        self.timeout_seconds = int(
            network.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        )
        self.retry_attempts = int(network.get("retry_attempts", 1))

    async def execute(
        self,
        request: VerifyRequest,
        destination: BinaryIO | Path,
        session: aiohttp.ClientSession | None = None,
    ) -> VerificationReport:
        """Download, verify and, when verified, release the artifact.

        Args:
            request: What to download and the expected checksums / key
            destination: Binary stream or file path for the artifact
            session: HTTP session to use; one is created from the
                configuration when omitted

        Returns:
            Report of the checks that ran. ``report.emitted`` tells
            whether the artifact reached the destination.

        Raises:
            ChecksumConfigError: If an expected checksum is malformed
            GpgKeyError: If the key identifier is rejected
            DownloadError: If the artifact cannot be downloaded
            KeyServerError: If the key cannot be resolved
            FileChangedError: If the file changed while being hashed
            OutputError: If the verified artifact cannot be written out
            OSError: If the temporary directory or file cannot be used

        """
        validate_expected(request.checksums)
        key_id = (
            new_cleaned_key_id(request.gpg_key, request.min_key_length)
            if request.gpg_key
            else None
        )

        with tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX) as tmp:
            if session is None:
                async with create_http_session(self.global_config) as owned:
                    report, path = await self._verify(
                        request, key_id, owned, Path(tmp)
                    )
            else:
                report, path = await self._verify(
                    request, key_id, session, Path(tmp)
                )

            if report.verified:
                report.bytes_written = self._emit(path, destination)
            else:
                logger.warning(
                    "Not releasing %s: %s",
                    request.url,
                    report.checksums.to_message(),
                )

        return report

    async def _verify(
        self,
        request: VerifyRequest,
        key_id: KeyID | None,
        session: aiohttp.ClientSession,
        directory: Path,
    ) -> tuple[VerificationReport, Path]:
        downloader = DownloadService(
            session,
            retry_attempts=self.retry_attempts,
            timeout=create_client_timeout(self.timeout_seconds),
        )
        path = await downloader.download_to_temporary_file(
            request.url, directory
        )

        result = await asyncio.to_thread(
            ChecksumVerifier(path).verify, request.checksums
        )
        logger.info("Checksum verification: %s", result.to_message())
        report = VerificationReport(
            url=request.url, checksums=result, key_id=key_id
        )

        if key_id is not None and not result.is_invalid:
            key_downloader = KeyDownloader(
                session,
                timeout=self.timeout_seconds * KEY_LOOKUP_DEADLINE_FACTOR,
                key_server_info=request.key_server_info,
            )
            report.key = await key_downloader.download_key(key_id)

        return report, path

    @staticmethod
    def _emit(path: Path, destination: BinaryIO | Path) -> int:
        try:
            if isinstance(destination, Path):
                with destination.open("wb") as stream:
                    return write_out_file(path, stream)
            return write_out_file(path, destination)
        except OSError as e:
            raise OutputError(str(e), str(destination)) from e
