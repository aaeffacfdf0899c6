"""Tests for the exception hierarchy."""

from pathlib import Path

import pytest

from dl_verify.exceptions import (
    ChecksumConfigError,
    DlVerifyError,
    DownloadError,
    FileChangedError,
    GpgKeyError,
    GpgKeyInsecureError,
    GpgKeyInvalidError,
    InvalidHashCharactersError,
    InvalidHashLengthError,
    KeyNotFoundError,
    KeyServerError,
    KeyServerTransportError,
    MultipleKeysReturnedError,
    NoKeyServersError,
    OutputError,
    UnexpectedContentTypeError,
)


def test_base_formatting() -> None:
    """Test messages carry the prefix and optional target."""
    assert str(DlVerifyError("went wrong")) == "Operation failed: went wrong"
    assert (
        str(DlVerifyError("went wrong", target="thing"))
        == "Operation failed for 'thing': went wrong"
    )


@pytest.mark.parametrize(
    ("error", "base"),
    [
        (InvalidHashLengthError("SHA1", 40, "ab"), ChecksumConfigError),
        (InvalidHashCharactersError("SHA1", "zz"), ChecksumConfigError),
        (GpgKeyInvalidError("XYZ", "Key not hexadecimal"), GpgKeyError),
        (GpgKeyInsecureError("12345678"), GpgKeyError),
        (KeyNotFoundError("https://k.example"), KeyServerError),
        (UnexpectedContentTypeError(None, "text/html"), KeyServerError),
        (MultipleKeysReturnedError(None, 2), KeyServerError),
        (KeyServerTransportError(None, "refused"), KeyServerError),
        (NoKeyServersError(), KeyServerError),
        (DownloadError("boom", "https://d.example"), DlVerifyError),
        (FileChangedError(Path("/tmp/x")), DlVerifyError),
        (OutputError("disk full", "out.bin"), DlVerifyError),
    ],
)
def test_hierarchy(error: DlVerifyError, base: type) -> None:
    """Test every error belongs to its family and to the base class."""
    assert isinstance(error, base)
    assert isinstance(error, DlVerifyError)


@pytest.mark.parametrize(
    ("error", "retryable"),
    [
        (KeyNotFoundError(), True),
        (UnexpectedContentTypeError(None, ""), True),
        (MultipleKeysReturnedError(None, 3), False),
        (KeyServerTransportError(None, "refused"), False),
        (NoKeyServersError(), False),
    ],
)
def test_retryable(
    error: KeyServerError,
    retryable: bool,  # noqa: FBT001
) -> None:
    """Test only not-found and wrong content type allow another server."""
    assert error.retryable is retryable


def test_insecure_key_bits() -> None:
    """Test the reported size is four bits per hex digit."""
    assert GpgKeyInsecureError("A" * 16).bits == 64
    assert GpgKeyInsecureError("A" * 8).bits == 32


def test_file_changed_keeps_path() -> None:
    """Test the changed file is reported."""
    error = FileChangedError(Path("/tmp/x"))

    assert error.path == Path("/tmp/x")
    assert "/tmp/x" in str(error)
