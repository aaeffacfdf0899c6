"""CLI runner for dl-verify.

Turns parsed arguments into a ``VerifyRequest``, runs the workflow and maps
its outcome to a process exit code.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from dl_verify import __version__
from dl_verify.cli.parser import CLIParser
from dl_verify.config import ConfigManager, Paths
from dl_verify.constants import (
    EXIT_INVALID_INPUT,
    EXIT_IO_FAILURE,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from dl_verify.core.gpg.downloader import key_fingerprint
from dl_verify.core.gpg.keys import KeyLength
from dl_verify.core.gpg.keyserver import (
    KeyServerInformation,
    check_key_server_host,
)
from dl_verify.core.verification import DigestAlgorithm, ExpectedDigestSet
from dl_verify.domain.types import GlobalConfig
from dl_verify.exceptions import (
    ChecksumConfigError,
    DownloadError,
    FileChangedError,
    GpgKeyError,
    KeyServerError,
    KeyServerTransportError,
    OutputError,
)
from dl_verify.logger import (
    ConfigurationError,
    get_logger,
    set_console_level,
    update_logger_from_config,
)
from dl_verify.ui.display import (
    print_error_message,
    print_key_value,
    print_success_message,
    print_warning_message,
)
from dl_verify.workflows import (
    VerificationReport,
    VerifyRequest,
    VerifyWorkflow,
)

logger = get_logger(__name__)

NO_VERIFICATION_MESSAGE = (
    "No verification was done. Cannot assert the validity of the file"
)
OUTPUT_FAILURE_MESSAGE = (
    "Failed to write out file.\n"
    "CAUTION: Some file data may have been sent already."
)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        """Initialize CLI runner.

        Args:
            argv: Command-line arguments, defaults to ``sys.argv[1:]``

        """
        self.argv = argv

    async def run(self) -> int:
        """Run the CLI application.

        Returns:
            Process exit code

        """
        args = CLIParser(self.argv).parse_args()

        if args.version:
            print(__version__)  # noqa: T201
            return EXIT_SUCCESS

        if not args.url:
            print_error_message("No URL specified. Use --help.")
            return EXIT_INVALID_INPUT

        try:
            global_config = self._load_config(args)
        except ConfigurationError as e:
            print_error_message(f"Configuration error: {e}")
            return EXIT_INVALID_INPUT

        try:
            request = self._build_request(args, global_config)
        except ValueError as e:
            print_error_message(str(e))
            return EXIT_INVALID_INPUT

        return await self._execute(args, request, global_config)

    def _load_config(self, args: Namespace) -> GlobalConfig:
        config_dir = (
            Paths.expand_path(args.config_dir) if args.config_dir else None
        )
        config_manager = ConfigManager(config_dir)
        global_config = config_manager.load_global_config()
        update_logger_from_config(global_config)
        if args.verbose:
            set_console_level("DEBUG")
        logger.debug("Loaded settings from %s", config_manager.config_dir)
        return global_config

    @staticmethod
    def _build_request(
        args: Namespace, global_config: GlobalConfig
    ) -> VerifyRequest:
        """Build the workflow request from arguments and configuration.

        Raises:
            ValueError: If the key server options leave nothing to query

        """
        checksums = ExpectedDigestSet.from_mapping(
            {
                algorithm: getattr(args, algorithm.value)
                for algorithm in DigestAlgorithm
            }
        )

        key_server_info: KeyServerInformation | None = None
        if args.gpg_key:
            key_server_info = CLIRunner._key_server_information(
                args, global_config
            )

        return VerifyRequest(
            url=args.url,
            checksums=checksums,
            gpg_key=args.gpg_key,
            min_key_length=KeyLength(args.min_key_length),
            key_server_info=key_server_info,
        )

    @staticmethod
    def _key_server_information(
        args: Namespace, global_config: GlobalConfig
    ) -> KeyServerInformation:
        section = global_config["keyserver"]
        info = KeyServerInformation(
            key_servers=[
                check_key_server_host(host)
                for host in dict.fromkeys(
                    [*args.keyservers, *section["servers"]]
                )
            ],
            use_https=section["use_https"] and not args.no_https,
            use_hkp=section["use_hkp"] or args.hkp,
            use_http=section["use_http"] or args.http,
        )
        if section["include_defaults"] and not args.no_default_keyservers:
            info.add_default_key_servers()

        if info.protocol_count == 0:
            msg = (
                "No key server protocol enabled, "
                "drop --no-https or add --hkp/--http"
            )
            raise ValueError(msg)
        if not info.key_servers:
            msg = "No key servers configured, add one with --keyserver"
            raise ValueError(msg)
        return info

    async def _execute(
        self,
        args: Namespace,
        request: VerifyRequest,
        global_config: GlobalConfig,
    ) -> int:
        destination: BinaryIO | Path = (
            args.output if args.output else sys.stdout.buffer
        )
        workflow = VerifyWorkflow(global_config)

        try:
            report = await workflow.execute(request, destination)
        except (ChecksumConfigError, GpgKeyError) as e:
            print_error_message(str(e))
            return EXIT_INVALID_INPUT
        except OutputError as e:
            logger.error("%s", e)
            print_error_message(OUTPUT_FAILURE_MESSAGE)
            return EXIT_IO_FAILURE
        except (KeyServerTransportError, DownloadError, FileChangedError) as e:
            print_error_message(str(e))
            return EXIT_IO_FAILURE
        except KeyServerError as e:
            print_error_message(str(e))
            return EXIT_VERIFICATION_FAILED
        except OSError as e:
            logger.exception("I/O failure while verifying %s", request.url)
            print_error_message(f"I/O failure: {e}")
            return EXIT_IO_FAILURE

        if args.report and not self._write_report(report, args.report):
            return EXIT_IO_FAILURE

        return self._report_outcome(report)

    @staticmethod
    def _write_report(report: VerificationReport, path: Path) -> bool:
        try:
            path.write_bytes(report.to_json())
        except OSError as e:
            logger.error("Could not write report to %s: %s", path, e)
            print_error_message(f"Could not write report to {path}: {e}")
            return False
        logger.debug("Report written to %s", path)
        return True

    @staticmethod
    def _report_outcome(report: VerificationReport) -> int:
        checksums = report.checksums

        if report.key is not None:
            print_key_value("GPG key:", key_fingerprint(report.key))
            for uid in report.key.userids:
                print_key_value(
                    "User ID:",
                    f"{uid.name} <{uid.email}>" if uid.email else uid.name,
                )

        if checksums.is_invalid:
            print_error_message(
                f"Checksum verification failed.\n{checksums.to_message()}."
            )
            return EXIT_VERIFICATION_FAILED

        if checksums.is_noop:
            print_warning_message(NO_VERIFICATION_MESSAGE)
            return EXIT_VERIFICATION_FAILED

        print_success_message(checksums.to_message())
        return EXIT_SUCCESS
