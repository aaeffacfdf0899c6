"""Command-line interface for dl-verify."""

from dl_verify.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
