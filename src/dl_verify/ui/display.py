"""Display utilities for command-line output.

Messages are printed to stderr because stdout is reserved for the verified
artifact.

Note:
    These functions use print() for direct console output to ensure
    messages are always visible to users regardless of logger configuration.
"""
# ruff: noqa: T201

import sys


def print_success_message(message: str) -> None:
    """Print a success message with icon."""
    print(f"✅ {message}", file=sys.stderr)


def print_error_message(message: str) -> None:
    """Print an error message with icon."""
    print(f"❌ {message}", file=sys.stderr)


def print_warning_message(message: str) -> None:
    """Print a warning message with icon."""
    print(f"⚠️  {message}", file=sys.stderr)


def print_key_value(
    key: str,
    value: str,
    key_width: int = 14,
    indent: int = 3,
) -> None:
    """Print a key-value pair with aligned formatting.

    Args:
        key: Key name.
        value: Value to display.
        key_width: Width for the key column.
        indent: Number of spaces to indent.

    """
    prefix = " " * indent
    print(f"{prefix}{key:<{key_width}} {value}", file=sys.stderr)
