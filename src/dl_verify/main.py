"""Main CLI entry point for dl-verify.

Runs the CLI runner on uvloop and turns its result into the process exit
status.
"""

import sys
from collections.abc import Sequence

import uvloop

from dl_verify.cli import CLIRunner
from dl_verify.constants import EXIT_CANCELLED, EXIT_VERIFICATION_FAILED
from dl_verify.logger import get_logger
from dl_verify.ui.display import print_error_message

logger = get_logger(__name__)


async def async_main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI asynchronously and return its exit code."""
    logger.info("CLI started")
    runner = CLIRunner(argv)
    try:
        code = await runner.run()
    except Exception:
        logger.exception("CLI encountered an error")
        raise
    logger.debug("CLI finished with exit code %s", code)
    return code


def main() -> None:
    """Run the CLI application.

    Raises:
        SystemExit: Always, with the exit code of the run.

    """
    try:
        code = uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        print_error_message("Operation cancelled by user")
        sys.exit(EXIT_CANCELLED)
    except Exception as e:
        logger.exception("Unexpected error")
        print_error_message(f"Unexpected error: {e}")
        sys.exit(EXIT_VERIFICATION_FAILED)
    sys.exit(code)


if __name__ == "__main__":
    main()
