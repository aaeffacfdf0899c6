"""Pytest configuration and fixtures for dl-verify tests."""

import logging
import os
import tempfile
from unittest.mock import MagicMock

import pgpy
import pytest
from pgpy.constants import (
    CompressionAlgorithm,
    HashAlgorithm,
    KeyFlags,
    PubKeyAlgorithm,
    SymmetricKeyAlgorithm,
)

# Keep test runs out of the user's log directory. Must be set before the
# first dl_verify module creates its logger.
os.environ.setdefault("DL_VERIFY_LOG_DIR", tempfile.mkdtemp(prefix="dlv-"))

from dl_verify.domain.types import (  # noqa: E402
    GlobalConfig,
    KeyServerConfig,
    NetworkConfig,
)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("dl_verify"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def global_config() -> GlobalConfig:
    """Provide a configuration with a single key server and no retries."""
    return GlobalConfig(
        config_version="1.0.0",
        log_level="INFO",
        console_log_level="WARNING",
        network=NetworkConfig(retry_attempts=1, timeout_seconds=5),
        keyserver=KeyServerConfig(
            servers=["keys.example.org"],
            use_https=True,
            use_hkp=False,
            use_http=False,
            include_defaults=False,
        ),
    )


@pytest.fixture
def mock_session() -> MagicMock:
    """Provide a mock aiohttp.ClientSession.

    ``session.get`` returns whatever the test configures; responses work as
    async context managers.
    """
    return MagicMock()


# =============================================================================
# OpenPGP keys
# =============================================================================


def generate_key(name: str, email: str) -> pgpy.PGPKey:
    """Generate a signing key with one user ID."""
    key = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048)
    uid = pgpy.PGPUID.new(name, email=email)
    key.add_uid(
        uid,
        usage={KeyFlags.Sign, KeyFlags.Certify},
        hashes=[HashAlgorithm.SHA256],
        ciphers=[SymmetricKeyAlgorithm.AES256],
        compression=[CompressionAlgorithm.ZLIB],
    )
    return key


@pytest.fixture(scope="session")
def pgp_key() -> pgpy.PGPKey:
    """Provide a generated private key; ``.pubkey`` is the public half."""
    return generate_key("Release Signer", "release@example.org")


@pytest.fixture(scope="session")
def other_pgp_key() -> pgpy.PGPKey:
    """Provide a second, unrelated generated key."""
    return generate_key("Someone Else", "else@example.org")


@pytest.fixture(scope="session")
def armored_key(pgp_key: pgpy.PGPKey) -> str:
    """Provide the ASCII-armored public key of ``pgp_key``."""
    return str(pgp_key.pubkey)


@pytest.fixture(scope="session")
def key_fingerprint_hex(pgp_key: pgpy.PGPKey) -> str:
    """Provide the upper-case fingerprint of ``pgp_key`` without spaces."""
    return str(pgp_key.fingerprint).replace(" ", "").upper()
