"""INI parser utilities for dl-verify configuration.

Helpers for reading values with inline comments and for writing a
self-documenting settings file.
"""

from datetime import UTC, datetime

from dl_verify.constants import (
    GLOBAL_CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    SECTION_DEFAULT,
    SECTION_KEYSERVER,
    SECTION_NETWORK,
)

TRUE_VALUES = frozenset({"1", "yes", "true", "on"})
FALSE_VALUES = frozenset({"0", "no", "false", "off"})


def _strip_inline_comment(value: str) -> str:
    """Strip inline comments from configuration values.

    Args:
        value: Configuration value that may contain inline comment

    Returns:
        Value with inline comment removed (anything after '  #')
    """
    if "  #" in value:
        return value.split("  #")[0].strip()
    return value.strip()


def parse_bool(value: str | bool, default: bool) -> bool:  # noqa: FBT001
    """Parse an INI boolean, returning ``default`` for unknown values."""
    if isinstance(value, bool):
        return value
    lowered = _strip_inline_comment(value).lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return default


def parse_list(value: str | list[str]) -> list[str]:
    """Parse a comma or whitespace separated list of names."""
    if isinstance(value, list):
        return [item for item in value if item]
    cleaned = _strip_inline_comment(value).replace(",", " ")
    return [item for item in cleaned.split() if item]


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# dl-verify Configuration
# Settings for downloading and verifying artifacts.
#
# Last updated: {timestamp}
# Configuration version: {GLOBAL_CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments for each configuration section."""
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level (DEBUG, INFO, etc.)

""",
            SECTION_NETWORK: """
# ========================================
# NETWORK CONFIGURATION
# ========================================
# retry_attempts: Number of times to retry a failed artifact download
# timeout_seconds: Seconds to wait before timing out requests

""",
            SECTION_KEYSERVER: """
# ========================================
# KEY SERVER CONFIGURATION
# ========================================
# servers: Comma separated key server host names
# use_https / use_hkp / use_http: Enabled protocols. HTTPS is tried
#   first, then HKP (port 11371), then plain HTTP.
# include_defaults: Also query the built-in default key servers

""",
        }
