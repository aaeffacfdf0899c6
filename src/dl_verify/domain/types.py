"""Configuration types for dl-verify.

These TypedDicts describe the parsed INI configuration handed around by
``ConfigManager``. They carry no behaviour.
"""

from typing import TypedDict


class NetworkConfig(TypedDict):
    """Network configuration options."""

    retry_attempts: int
    timeout_seconds: int


class KeyServerConfig(TypedDict):
    """Key server lookup configuration options."""

    servers: list[str]
    use_https: bool
    use_hkp: bool
    use_http: bool
    include_defaults: bool


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    log_level: str
    console_log_level: str
    network: NetworkConfig
    keyserver: KeyServerConfig
