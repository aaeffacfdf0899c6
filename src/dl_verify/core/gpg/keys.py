"""GPG key identifiers.

A key can be named by a 32-bit or 64-bit key ID, or by a version 3 or
version 4 fingerprint. Short key IDs are cheap to forge with colliding
keys, so callers must opt in to them by lowering the minimum length.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import IntEnum

from dl_verify.exceptions import GpgKeyInsecureError, GpgKeyInvalidError

_HEX_PATTERN = re.compile(r"[0-9A-F]*")

REASON_NOT_HEX = "Key not hexadecimal"
REASON_BAD_LENGTH = "Key not a supported length"


class KeyLength(IntEnum):
    """Hexadecimal lengths of the supported key identifier forms."""

    KEY_ID_32_BIT = 8
    KEY_ID_64_BIT = 16
    FINGERPRINT_V3 = 32
    FINGERPRINT_V4 = 40


SUPPORTED_LENGTHS = frozenset(int(length) for length in KeyLength)


@dataclass(slots=True, frozen=True)
class KeyID:
    """A validated, upper-case hexadecimal GPG key identifier.

    Use :func:`new_key_id` or :func:`new_cleaned_key_id` to build one from
    user input. Direct construction only accepts values that are already
    in canonical form.
    """

    value: str

    def __post_init__(self) -> None:
        """Reject values that are not canonical key identifiers."""
        if not _HEX_PATTERN.fullmatch(self.value):
            raise GpgKeyInvalidError(self.value, REASON_NOT_HEX)
        if len(self.value) not in SUPPORTED_LENGTHS:
            raise GpgKeyInvalidError(self.value, REASON_BAD_LENGTH)

    def __str__(self) -> str:
        return self.value

    @property
    def length(self) -> KeyLength:
        """Which identifier form this key uses."""
        return KeyLength(len(self.value))

    def clean(self) -> KeyID:
        """Re-validate with the minimum length key servers accept."""
        return new_cleaned_key_id(self.value, KeyLength.KEY_ID_32_BIT)


def _strip_separators(raw: str) -> str:
    return "".join(
        ch
        for ch in raw
        if not ch.isspace() and not unicodedata.category(ch).startswith("P")
    )


def new_cleaned_key_id(raw: str, min_length: KeyLength | int) -> KeyID:
    """Normalize and validate a user supplied key identifier.

    Whitespace and punctuation are removed (so ``"0x1234 5678"`` and
    ``"1234:5678"`` are accepted), the result is upper-cased and a leading
    ``0X`` is dropped. An odd-length value starting with ``0`` loses that
    ``0``.

    Args:
        raw: Key ID or fingerprint as typed by the user
        min_length: Shortest identifier form to accept

    Returns:
        The canonical KeyID

    Raises:
        GpgKeyInvalidError: If the key is not hexadecimal or not one of the
            supported lengths
        GpgKeyInsecureError: If the key is shorter than ``min_length``

    """
    key = _strip_separators(raw).upper()
    key = key.removeprefix("0X")

    if not _HEX_PATTERN.fullmatch(key):
        raise GpgKeyInvalidError(key, REASON_NOT_HEX)

    if len(key) % 2 == 1 and key.startswith("0"):
        key = key[1:]

    if len(key) not in SUPPORTED_LENGTHS:
        raise GpgKeyInvalidError(key, REASON_BAD_LENGTH)

    if len(key) < min_length:
        raise GpgKeyInsecureError(key)

    return KeyID(key)


def new_key_id(raw: str) -> KeyID:
    """Validate a key identifier, requiring at least a v3 fingerprint."""
    return new_cleaned_key_id(raw, KeyLength.FINGERPRINT_V3)
