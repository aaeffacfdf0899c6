"""Supported digest algorithms."""

import hashlib
from enum import Enum
from typing import Any


class DigestAlgorithm(Enum):
    """Digest algorithms accepted for checksum verification.

    Member order is the order in which checksums are computed and reported.
    """

    SHA512 = "sha512"
    SHA384 = "sha384"
    SHA256 = "sha256"
    SHA224 = "sha224"
    SHA1 = "sha1"
    MD5 = "md5"

    @property
    def display_name(self) -> str:
        """Upper-case name used in messages and reports, e.g. ``SHA256``."""
        return self.name

    @property
    def byte_length(self) -> int:
        """Length of the raw digest in bytes."""
        return self.new().digest_size

    @property
    def hex_length(self) -> int:
        """Length of the hex-encoded digest."""
        return 2 * self.byte_length

    def new(self) -> Any:  # noqa: ANN401
        """Create a fresh incremental hash object."""
        return hashlib.new(self.value)

    @classmethod
    def from_name(cls, name: str) -> "DigestAlgorithm":
        """Look up an algorithm by name, ignoring case and dashes.

        Raises:
            ValueError: If the name is not a supported algorithm

        """
        normalized = name.replace("-", "").lower()
        for algorithm in cls:
            if algorithm.value == normalized:
                return algorithm
        msg = f"Unsupported digest algorithm: {name}"
        raise ValueError(msg)
