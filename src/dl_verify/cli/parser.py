"""CLI argument parser for dl-verify.

Defines the command-line options for downloading and verifying a single
artifact.
"""

import argparse
import sys
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from dl_verify.constants import EXIT_INVALID_INPUT
from dl_verify.core.gpg.keys import SUPPORTED_LENGTHS, KeyLength
from dl_verify.core.verification import DigestAlgorithm


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with the invalid input code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_INVALID_INPUT, f"{self.prog}: error: {message}\n")


class CLIParser:
    """Command-line argument parser for dl-verify."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        """Initialize the CLI parser.

        Args:
            argv: Arguments to parse, defaults to ``sys.argv[1:]``

        """
        self.argv = argv

    def parse_args(self) -> Namespace:
        """Parse command-line arguments.

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_checksum_options(parser)
        self._add_gpg_options(parser)
        return parser.parse_args(self.argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return _ArgumentParser(
            prog="dl-verify",
            description=(
                "Download a file and release it only after its checksums "
                "have been verified"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Verify with a SHA-256 checksum and write the file to stdout
  %(prog)s -u https://example.org/tool.tar.gz --sha256 <hex> > tool.tar.gz

  # Write to a file and also look up the signing key
  %(prog)s -u https://example.org/tool.tar.gz --sha512 <hex> \\
      --gpg-key 0x<fingerprint> -o tool.tar.gz

  # Save a JSON report of the checks
  %(prog)s -u https://example.org/tool.tar.gz --sha1 <hex> \\
      -o tool.tar.gz --report report.json
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show dl-verify version and exit",
        )
        parser.add_argument(
            "-u",
            "--url",
            help="URL of the file to download",
        )
        parser.add_argument(
            "-o",
            "--output",
            type=Path,
            help="Write the verified file here instead of stdout",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show debug output on stderr",
        )
        parser.add_argument(
            "--report",
            type=Path,
            help="Write a JSON report of the verification to this file",
        )
        parser.add_argument(
            "--config-dir",
            type=Path,
            help="Use this configuration directory instead of the default",
        )

    def _add_checksum_options(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group(
            "checksums",
            "Expected checksums as hexadecimal strings (case-insensitive)",
        )
        for algorithm in DigestAlgorithm:
            group.add_argument(
                f"--{algorithm.value}",
                metavar="HEX",
                help=f"Expected {algorithm.display_name} checksum",
            )

    def _add_gpg_options(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_argument_group("gpg key")
        group.add_argument(
            "--gpg-key",
            metavar="KEY",
            help="Key ID or fingerprint to look up on the key servers",
        )
        group.add_argument(
            "--min-key-length",
            type=int,
            choices=sorted(SUPPORTED_LENGTHS),
            default=int(KeyLength.FINGERPRINT_V3),
            help=(
                "Shortest key identifier accepted, in hex digits "
                "(default: %(default)s)"
            ),
        )
        group.add_argument(
            "--keyserver",
            dest="keyservers",
            action="append",
            default=[],
            metavar="HOST",
            help="Additional key server host name (repeatable)",
        )
        group.add_argument(
            "--no-default-keyservers",
            action="store_true",
            help="Do not add the built-in key servers",
        )
        group.add_argument(
            "--hkp",
            action="store_true",
            help="Also query key servers over HKP on port 11371",
        )
        group.add_argument(
            "--http",
            action="store_true",
            help="Also query key servers over plain HTTP",
        )
        group.add_argument(
            "--no-https",
            action="store_true",
            help="Do not query key servers over HTTPS",
        )
