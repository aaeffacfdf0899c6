"""Caller-supplied checksums and their validation.

Expected checksums are checked for shape before anything is downloaded so
that a typo on the command line fails fast instead of after a long
transfer.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields

from dl_verify.core.verification.algorithms import DigestAlgorithm
from dl_verify.exceptions import (
    InvalidHashCharactersError,
    InvalidHashLengthError,
)
from dl_verify.logger import get_logger

logger = get_logger(__name__)

_HEX_PATTERN = re.compile(r"[0-9a-f]+")


@dataclass(slots=True, frozen=True)
class ExpectedDigestSet:
    """Expected hex digests, one optional value per algorithm.

    An empty or missing value means the algorithm was not requested. It
    never means the digest must be absent.
    """

    sha512: str | None = None
    sha384: str | None = None
    sha256: str | None = None
    sha224: str | None = None
    sha1: str | None = None
    md5: str | None = None

    @classmethod
    def from_mapping(
        cls, values: Mapping[str | DigestAlgorithm, str | None]
    ) -> ExpectedDigestSet:
        """Build a set from algorithm names (or members) to hex strings.

        Raises:
            ValueError: If a key is not a supported algorithm

        """
        kwargs: dict[str, str | None] = {}
        for key, value in values.items():
            algorithm = (
                key
                if isinstance(key, DigestAlgorithm)
                else DigestAlgorithm.from_name(key)
            )
            kwargs[algorithm.value] = value
        return cls(**kwargs)

    def as_mapping(self) -> dict[DigestAlgorithm, str]:
        """Return requested digests, lower-cased, in algorithm order."""
        requested: dict[DigestAlgorithm, str] = {}
        for algorithm in DigestAlgorithm:
            value = getattr(self, algorithm.value)
            if value:
                requested[algorithm] = value.strip().lower()
        return requested

    @property
    def requested_algorithms(self) -> list[DigestAlgorithm]:
        """Algorithms with an expected value."""
        return list(self.as_mapping())

    def __bool__(self) -> bool:
        """True when at least one digest was supplied."""
        return any(getattr(self, f.name) for f in fields(self))


def validate_expected(expected: ExpectedDigestSet) -> None:
    """Check that every supplied digest is well formed.

    Args:
        expected: Digests supplied by the caller

    Raises:
        InvalidHashLengthError: If a digest has the wrong number of
            characters for its algorithm
        InvalidHashCharactersError: If a digest is not hexadecimal

    """
    for algorithm, value in expected.as_mapping().items():
        if len(value) != algorithm.hex_length:
            logger.debug(
                "%s checksum has length %d, expected %d",
                algorithm.display_name,
                len(value),
                algorithm.hex_length,
            )
            raise InvalidHashLengthError(
                algorithm.display_name, algorithm.hex_length, value
            )
        if not _HEX_PATTERN.fullmatch(value):
            raise InvalidHashCharactersError(algorithm.display_name, value)
