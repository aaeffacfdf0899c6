"""Verification result types for checksum verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def english_join(items: tuple[str, ...] | list[str]) -> str:
    """Join names as an English list: ``A``, ``A and B``, ``A, B and C``."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


@dataclass(slots=True, frozen=True)
class VerificationResult:
    """Outcome of checking a file against the requested checksums.

    Attributes:
        valid: Names of algorithms whose digest matched
        invalid: Names of algorithms whose digest did not match

    Algorithms that were not requested appear in neither tuple. A name
    never appears twice, and never in both tuples.

    """

    valid: tuple[str, ...] = ()
    invalid: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject results that break the valid/invalid invariant."""
        names = self.valid + self.invalid
        if len(set(names)) != len(names):
            msg = (
                "Algorithm listed more than once in verification result: "
                f"valid={self.valid}, invalid={self.invalid}"
            )
            raise ValueError(msg)

    @property
    def is_valid(self) -> bool:
        """At least one checksum matched and none mismatched."""
        return len(self.valid) >= 1 and not self.invalid

    @property
    def is_invalid(self) -> bool:
        """At least one checksum mismatched, whatever else matched."""
        return len(self.invalid) >= 1

    @property
    def is_noop(self) -> bool:
        """No checksum was requested, so nothing was verified."""
        return not self.valid and not self.invalid

    def to_message(self) -> str:
        """Render the result as a user-displayable sentence."""
        if self.is_noop:
            return "The file's contents was not validated using checksums"
        if self.is_valid:
            return (
                "The file's contents succeeded validation using "
                f"{english_join(self.valid)}"
            )
        failed = (
            "The file's contents failed validation using "
            f"{english_join(self.invalid)}"
        )
        if self.valid:
            return (
                f"{failed}, it did succeed validation using "
                f"{english_join(self.valid)}"
            )
        return failed

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON reports."""
        return {
            "valid": list(self.valid),
            "invalid": list(self.invalid),
            "is_valid": self.is_valid,
            "is_invalid": self.is_invalid,
            "is_noop": self.is_noop,
            "message": self.to_message(),
        }
