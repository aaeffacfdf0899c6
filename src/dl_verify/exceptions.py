"""Exception classes for dl-verify operations.

The hierarchy is closed: every failure the verification engine can report
is one of the classes below, and each carries the structured fields callers
need to react to it without parsing messages.

    DlVerifyError
    ├── ChecksumConfigError
    │   ├── InvalidHashLengthError
    │   └── InvalidHashCharactersError
    ├── FileChangedError
    ├── GpgKeyError
    │   ├── GpgKeyInvalidError
    │   └── GpgKeyInsecureError
    ├── KeyServerError
    │   ├── KeyNotFoundError            (retryable)
    │   ├── UnexpectedContentTypeError  (retryable)
    │   ├── MultipleKeysReturnedError
    │   ├── KeyServerTransportError
    │   └── NoKeyServersError
    ├── DownloadError
    └── OutputError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dl_verify.constants import SHORT_KEY_ID_COLLISION_URL

if TYPE_CHECKING:
    from pathlib import Path

BITS_PER_HEX_DIGIT = 4
SHORT_KEY_ID_LENGTH = 8


class DlVerifyError(Exception):
    """Base exception for dl-verify operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


# =============================================================================
# Checksum configuration
# =============================================================================


class ChecksumConfigError(DlVerifyError):
    """Raised when a caller-supplied checksum is malformed."""

    error_prefix = "Invalid checksum"

    def __init__(self, message: str, algorithm: str, value: str) -> None:
        super().__init__(message, target=algorithm)
        self.algorithm = algorithm
        self.value = value


class InvalidHashLengthError(ChecksumConfigError):
    """Raised when a checksum does not have the algorithm's hex length."""

    def __init__(
        self, algorithm: str, expected_length: int, value: str
    ) -> None:
        self.expected_length = expected_length
        self.actual_length = len(value)
        message = (
            f"Given {algorithm} hash expects a hexadecimal string of length "
            f"{expected_length}. Got length {len(value)}: `{value}'"
        )
        super().__init__(message, algorithm, value)


class InvalidHashCharactersError(ChecksumConfigError):
    """Raised when a checksum is not a hexadecimal string."""

    def __init__(self, algorithm: str, value: str) -> None:
        message = (
            f"Given {algorithm} hash is not a valid hexadecimal value: "
            f"`{value}'"
        )
        super().__init__(message, algorithm, value)


class FileChangedError(DlVerifyError):
    """Raised when the file changes between two checksum passes."""

    error_prefix = "Checksum verification aborted"

    def __init__(self, path: Path) -> None:
        super().__init__(
            "file was modified while its checksums were being computed",
            target=str(path),
        )
        self.path = path


# =============================================================================
# GPG key identifiers
# =============================================================================


class GpgKeyError(DlVerifyError):
    """Base class for rejected GPG key identifiers."""

    error_prefix = "Invalid GPG key"

    def __init__(self, message: str, key: str) -> None:
        super().__init__(message)
        self.key = key


class GpgKeyInvalidError(GpgKeyError):
    """Raised when a key identifier has bad characters or a bad length."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Given key is not valid. Reason: {reason}", key)
        self.reason = reason


class GpgKeyInsecureError(GpgKeyError):
    """Raised when a key identifier is shorter than the allowed minimum.

    32-bit and 64-bit key IDs can be forged with colliding keys, so they
    are only accepted when the caller explicitly lowers the minimum.
    """

    error_prefix = "Insecure GPG key"

    def __init__(self, key: str) -> None:
        self.bits = len(key) * BITS_PER_HEX_DIGIT
        message = f"{self.bits}-bit keys are not supported"
        if len(key) == SHORT_KEY_ID_LENGTH:
            message += f". See also {SHORT_KEY_ID_COLLISION_URL}"
        super().__init__(message, key)


# =============================================================================
# Key servers
# =============================================================================


class KeyServerError(DlVerifyError):
    """Base class for key server lookup failures.

    Attributes:
        retryable: Whether the next key server should be tried after this
            error. Non-retryable errors stop the lookup immediately.

    """

    error_prefix = "Key server lookup failed"
    retryable: bool = False

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, target=url)
        self.url = url


class KeyNotFoundError(KeyServerError):
    """Raised when a key server does not have the requested key."""

    retryable = True

    def __init__(self, url: str | None = None) -> None:
        super().__init__("Specified key was not found on server", url)


class UnexpectedContentTypeError(KeyServerError):
    """Raised when a key server answers with the wrong Content-Type."""

    retryable = True

    def __init__(self, url: str | None, content_type: str) -> None:
        super().__init__(
            "server did not return the expected content type "
            f"(got {content_type or 'none'!r})",
            url,
        )
        self.content_type = content_type


class MultipleKeysReturnedError(KeyServerError):
    """Raised when a key server returns more than one key.

    This means the key ID or fingerprint is shared by several keys, which
    is never resolved by picking one of them.
    """

    def __init__(self, url: str | None, count: int) -> None:
        super().__init__(
            f"server returned {count} keys, verify the given key, "
            "key id and fingerprint",
            url,
        )
        self.count = count


class KeyServerTransportError(KeyServerError):
    """Raised when a key server cannot be reached at all."""

    def __init__(self, url: str | None, reason: str) -> None:
        super().__init__(f"transport failure: {reason}", url)
        self.reason = reason


class NoKeyServersError(KeyServerError):
    """Raised when no key server candidate is configured."""

    def __init__(self) -> None:
        super().__init__(
            "no key servers to query, enable at least one protocol "
            "and configure at least one server"
        )


# =============================================================================
# Artifact download
# =============================================================================


class DownloadError(DlVerifyError):
    """Raised when the artifact cannot be downloaded."""

    error_prefix = "Download failed"

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, target=url)
        self.url = url


class OutputError(DlVerifyError):
    """Raised when a verified artifact cannot be written out.

    Some bytes may already have reached the destination.
    """

    error_prefix = "Failed to write out file"

    def __init__(self, message: str, destination: str) -> None:
        super().__init__(message, target=destination)
        self.destination = destination
