"""Checksum verifier for downloaded artifacts.

Each requested algorithm gets its own full pass over the file, which is
re-opened by path every time. The file's size and modification time are
compared between passes so that a file changing underneath the verifier
is reported instead of producing a mix of digests over different
contents.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from dl_verify.constants import HASH_CHUNK_SIZE
from dl_verify.core.verification.results import VerificationResult
from dl_verify.exceptions import FileChangedError
from dl_verify.logger import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from dl_verify.core.verification.algorithms import DigestAlgorithm
    from dl_verify.core.verification.checksum import ExpectedDigestSet

logger = get_logger(__name__)

BYTES_PER_UNIT = 1024.0


def format_bytes(num_bytes: float) -> str:
    """Convert a byte count to a human-readable string.

    Raises ``ValueError`` if the input is negative.
    """
    if num_bytes < 0:
        message = "Byte size cannot be negative"
        raise ValueError(message)

    units = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]
    size = float(num_bytes)
    unit_index = 0

    while size >= BYTES_PER_UNIT and unit_index < len(units) - 1:
        size /= BYTES_PER_UNIT
        unit_index += 1

    return f"{size:.1f} {units[unit_index]}"


def _file_signature(stat_result: os.stat_result) -> tuple[int, int]:
    return stat_result.st_size, stat_result.st_mtime_ns


class ChecksumVerifier:
    """Computes digests of a local file and compares them to expectations."""

    def __init__(self, file_path: Path) -> None:
        """Create verifier for a downloaded file."""
        self.file_path: Path = file_path

    def compute_hash(self, algorithm: DigestAlgorithm) -> str:
        """Compute the hex digest of the file with the given algorithm.

        Raises:
            OSError: If the file cannot be opened or read

        """
        hasher = algorithm.new()
        bytes_processed = 0

        with self.file_path.open("rb") as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                hasher.update(chunk)
                bytes_processed += len(chunk)

        computed_hash = hasher.hexdigest()
        logger.debug(
            "   %s processed %s (%d bytes): %s",
            algorithm.display_name,
            format_bytes(bytes_processed),
            bytes_processed,
            computed_hash,
        )
        return computed_hash

    def verify(self, expected: ExpectedDigestSet) -> VerificationResult:
        """Check the file against every requested digest.

        Args:
            expected: Expected digests; algorithms without a value are
                skipped

        Returns:
            VerificationResult listing matched and mismatched algorithms

        Raises:
            OSError: If the file cannot be read. No partial result is
                returned.
            FileChangedError: If the file changed between two passes

        """
        requested = expected.as_mapping()
        if not requested:
            logger.debug("No checksums requested for %s", self.file_path)
            return VerificationResult()

        valid: list[str] = []
        invalid: list[str] = []

        try:
            signature = _file_signature(self.file_path.stat())
            for algorithm, expected_hash in requested.items():
                actual_hash = self.compute_hash(algorithm)
                if _file_signature(self.file_path.stat()) != signature:
                    logger.error(
                        "File %s changed during checksum verification",
                        self.file_path,
                    )
                    raise FileChangedError(self.file_path)

                matches = actual_hash == expected_hash
                logger.info(
                    "%s checksum %s for %s",
                    algorithm.display_name,
                    "matches" if matches else "DOES NOT match",
                    self.file_path.name,
                )
                if matches:
                    valid.append(algorithm.display_name)
                else:
                    logger.debug("   Expected: %s", expected_hash)
                    logger.debug("   Actual:   %s", actual_hash)
                    invalid.append(algorithm.display_name)
        except OSError:
            logger.exception(
                "Failed to read %s for checksum verification", self.file_path
            )
            raise

        return VerificationResult(valid=tuple(valid), invalid=tuple(invalid))
