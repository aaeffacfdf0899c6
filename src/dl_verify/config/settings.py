"""Global configuration manager for INI settings."""

import configparser
import logging
from pathlib import Path

from dl_verify.config.parser import (
    ConfigCommentManager,
    _strip_inline_comment,
    parse_bool,
    parse_list,
)
from dl_verify.config.paths import Paths
from dl_verify.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_KEY_SERVERS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    GLOBAL_CONFIG_VERSION,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    SECTION_DEFAULT,
    SECTION_KEYSERVER,
    SECTION_NETWORK,
    VALID_LOG_LEVELS,
)
from dl_verify.domain.types import (
    GlobalConfig,
    KeyServerConfig,
    NetworkConfig,
)

logger = logging.getLogger(__name__)

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class GlobalConfigManager:
    """Manages the global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize global config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_global_config(self) -> RawConfigDict:
        """Get default global configuration values."""
        return {
            KEY_CONFIG_VERSION: GLOBAL_CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_NETWORK: {
                "retry_attempts": str(DEFAULT_RETRY_ATTEMPTS),
                "timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS),
            },
            SECTION_KEYSERVER: {
                "servers": ", ".join(DEFAULT_KEY_SERVERS),
                "use_https": "true",
                "use_hkp": "false",
                "use_http": "false",
                "include_defaults": "true",
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser populated with the defaults dictionary."""
        config = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from the INI file.

        The settings file is created with defaults when it does not exist.
        An unreadable file is reported and the defaults are used instead.

        Returns:
            Loaded global configuration

        """
        defaults = self.get_default_global_config()
        config = self._create_config_from_defaults(defaults)

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                logger.warning(
                    "Could not parse %s, using defaults: %s",
                    self.settings_file,
                    e,
                )
                config = self._create_config_from_defaults(defaults)
        else:
            try:
                self.save_global_config(
                    self._convert_to_global_config(config)
                )
            except OSError as e:
                logger.warning(
                    "Could not write default settings to %s: %s",
                    self.settings_file,
                    e,
                )

        return self._convert_to_global_config(config)

    def save_global_config(self, config: GlobalConfig) -> None:
        """Save global configuration to INI file with comments.

        Args:
            config: Global configuration to save

        """
        comments = ConfigCommentManager.get_section_comments()
        self.config_dir.mkdir(parents=True, exist_ok=True)

        sections: list[tuple[str, dict[str, str]]] = [
            (
                SECTION_DEFAULT,
                {
                    KEY_CONFIG_VERSION: config["config_version"],
                    KEY_LOG_LEVEL: config["log_level"],
                    KEY_CONSOLE_LOG_LEVEL: config["console_log_level"],
                },
            ),
            (
                SECTION_NETWORK,
                {
                    "retry_attempts": str(
                        config["network"]["retry_attempts"]
                    ),
                    "timeout_seconds": str(
                        config["network"]["timeout_seconds"]
                    ),
                },
            ),
            (
                SECTION_KEYSERVER,
                {
                    "servers": ", ".join(config["keyserver"]["servers"]),
                    "use_https": _format_bool(
                        config["keyserver"]["use_https"]
                    ),
                    "use_hkp": _format_bool(config["keyserver"]["use_hkp"]),
                    "use_http": _format_bool(
                        config["keyserver"]["use_http"]
                    ),
                    "include_defaults": _format_bool(
                        config["keyserver"]["include_defaults"]
                    ),
                },
            ),
        ]

        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(ConfigCommentManager.get_file_header())
            for section, values in sections:
                f.write(comments[section])
                f.write(f"[{section}]\n")
                for key, value in values.items():
                    f.write(f"{key} = {value}\n")

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        """Convert a populated ConfigParser into a typed GlobalConfig."""
        defaults = config.defaults()

        def get_level(key: str, default: str) -> str:
            value = _strip_inline_comment(defaults.get(key, default)).upper()
            if value not in VALID_LOG_LEVELS:
                logger.warning(
                    "Invalid %s %r in settings, using %s", key, value, default
                )
                return default
            return value

        def get_int(section: str, key: str, default: int) -> int:
            raw = _strip_inline_comment(config.get(section, key, raw=True))
            try:
                value = int(raw)
            except ValueError:
                logger.warning(
                    "Invalid integer %s.%s=%r in settings, using %s",
                    section,
                    key,
                    raw,
                    default,
                )
                return default
            if value < 1:
                logger.warning(
                    "%s.%s must be positive, using %s", section, key, default
                )
                return default
            return value

        def get_bool(key: str, default: bool) -> bool:  # noqa: FBT001
            return parse_bool(
                config.get(SECTION_KEYSERVER, key, raw=True), default
            )

        return GlobalConfig(
            config_version=_strip_inline_comment(
                defaults.get(KEY_CONFIG_VERSION, GLOBAL_CONFIG_VERSION)
            ),
            log_level=get_level(KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            console_log_level=get_level(
                KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
            ),
            network=NetworkConfig(
                retry_attempts=get_int(
                    SECTION_NETWORK, "retry_attempts", DEFAULT_RETRY_ATTEMPTS
                ),
                timeout_seconds=get_int(
                    SECTION_NETWORK,
                    "timeout_seconds",
                    DEFAULT_TIMEOUT_SECONDS,
                ),
            ),
            keyserver=KeyServerConfig(
                servers=parse_list(
                    config.get(SECTION_KEYSERVER, "servers", raw=True)
                ),
                use_https=get_bool("use_https", True),
                use_hkp=get_bool("use_hkp", False),
                use_http=get_bool("use_http", False),
                include_defaults=get_bool("include_defaults", True),
            ),
        )


def _format_bool(value: bool) -> str:  # noqa: FBT001
    return "true" if value else "false"
