"""Configuration management - INI settings and path utilities.

- ConfigManager: Facade for configuration operations
- GlobalConfigManager: INI configuration management
- Paths: Path constants and utilities
"""

from dl_verify.config.config import ConfigManager
from dl_verify.config.parser import ConfigCommentManager
from dl_verify.config.paths import Paths
from dl_verify.config.settings import GlobalConfigManager
from dl_verify.domain.types import GlobalConfig

__all__ = [
    "ConfigCommentManager",
    "ConfigManager",
    "GlobalConfig",
    "GlobalConfigManager",
    "Paths",
]
