"""Configuration facade for dl-verify.

``ConfigManager`` wraps the INI manager and turns the key server section
into the ``KeyServerInformation`` the GPG client consumes.
"""

import logging
from pathlib import Path

from dl_verify.config.paths import Paths
from dl_verify.config.settings import GlobalConfigManager
from dl_verify.core.gpg.keyserver import KeyServerInformation
from dl_verify.domain.types import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Facade that coordinates configuration loading."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Optional custom config directory.
                Defaults to Paths.CONFIG_DIR

        """
        self._config_dir = config_dir or Paths.CONFIG_DIR
        self.global_config_manager = GlobalConfigManager(self._config_dir)

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir

    def load_global_config(self) -> GlobalConfig:
        """Load the global INI configuration."""
        return self.global_config_manager.load_global_config()

    def save_global_config(self, config: GlobalConfig) -> None:
        """Persist the global INI configuration."""
        self.global_config_manager.save_global_config(config)

    @staticmethod
    def key_server_information(
        config: GlobalConfig,
    ) -> KeyServerInformation:
        """Build key server settings from a loaded configuration.

        Args:
            config: Loaded global configuration

        Returns:
            KeyServerInformation with the configured servers and protocols,
            extended with the built-in defaults when ``include_defaults``
            is set.

        """
        section = config["keyserver"]
        info = KeyServerInformation(
            key_servers=list(section["servers"]),
            use_https=section["use_https"],
            use_hkp=section["use_hkp"],
            use_http=section["use_http"],
        )
        if section["include_defaults"]:
            info.add_default_key_servers()
        logger.debug(
            "Key servers from config: %s", ", ".join(info.key_servers)
        )
        return info
