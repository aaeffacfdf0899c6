"""Checksum verification for downloaded artifacts."""

from dl_verify.core.verification.algorithms import DigestAlgorithm
from dl_verify.core.verification.checksum import (
    ExpectedDigestSet,
    validate_expected,
)
from dl_verify.core.verification.results import VerificationResult
from dl_verify.core.verification.verifier import ChecksumVerifier

__all__ = [
    "ChecksumVerifier",
    "DigestAlgorithm",
    "ExpectedDigestSet",
    "VerificationResult",
    "validate_expected",
]
