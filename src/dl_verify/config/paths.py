"""Path constants and utilities for dl-verify configuration."""

from pathlib import Path

from dl_verify.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_BASE_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR
    CONFIG_DIR = CONFIG_BASE_DIR / CONFIG_DIR_NAME

    @classmethod
    def expand_path(cls, path_str: str | Path) -> Path:
        """Expand ``~`` and resolve a user supplied path.

        Args:
            path_str: Path string from the command line or config file

        Returns:
            Absolute path

        """
        return Path(path_str).expanduser().resolve()
