"""Workflows combining download, verification and release."""

from dl_verify.workflows.verify import (
    VerificationReport,
    VerifyRequest,
    VerifyWorkflow,
)

__all__ = ["VerificationReport", "VerifyRequest", "VerifyWorkflow"]
