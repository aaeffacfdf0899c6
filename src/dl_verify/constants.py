"""Application-wide constants for dl-verify.

Values shared by the verification engine, the key server client, the
configuration layer and the logging package live here so that each module
imports them from a single place.
"""

from typing import Final

# =============================================================================
# Application identity
# =============================================================================

APP_NAME: Final[str] = "dl-verify"
CONFIG_DIR_NAME: Final[str] = "dl-verify"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"
CONFIG_FILE_NAME: Final[str] = "settings.conf"
LOG_FILE_NAME: Final[str] = "dl-verify.log"
LOG_DIR_ENV_VAR: Final[str] = "DL_VERIFY_LOG_DIR"

# =============================================================================
# Checksum verification
# =============================================================================

HASH_CHUNK_SIZE: Final[int] = 8192

# =============================================================================
# GPG key servers
# =============================================================================

HKP_PORT: Final[int] = 11371
KEYSERVER_LOOKUP_PATH: Final[str] = "/pks/lookup"
PGP_KEYS_CONTENT_TYPE: Final[str] = "application/pgp-keys"
DEFAULT_KEY_SERVERS: Final[tuple[str, ...]] = ("pgp.mit.edu",)
SHORT_KEY_ID_COLLISION_URL: Final[str] = "https://evil32.com/"
ARMORED_PUBLIC_KEY_HEADER: Final[str] = "-----BEGIN PGP PUBLIC KEY BLOCK-----"

# =============================================================================
# Download
# =============================================================================

DOWNLOAD_CHUNK_SIZE: Final[int] = 8192
DEFAULT_DOWNLOAD_FILENAME: Final[str] = "download"
TEMP_DIR_PREFIX: Final[str] = "dlverify"

# =============================================================================
# Configuration file layout
# =============================================================================

GLOBAL_CONFIG_VERSION: Final[str] = "1.0.0"
ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S%z"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_KEYSERVER: Final[str] = "keyserver"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_RETRY_ATTEMPTS: Final[int] = 3
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

VALID_LOG_LEVELS: Final[tuple[str, ...]] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)

# =============================================================================
# Logging
# =============================================================================

LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 10 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 5
LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(funcName)s:%(lineno)d] - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}

# =============================================================================
# Exit codes
# =============================================================================

EXIT_SUCCESS: Final[int] = 0
EXIT_VERIFICATION_FAILED: Final[int] = 1
EXIT_INVALID_INPUT: Final[int] = 3
EXIT_IO_FAILURE: Final[int] = 4
EXIT_CANCELLED: Final[int] = 130
