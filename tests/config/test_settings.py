"""Tests for the INI configuration managers."""

import configparser
from pathlib import Path

import pytest

from dl_verify.config import ConfigManager, GlobalConfigManager
from dl_verify.config.parser import (
    ConfigCommentManager,
    _strip_inline_comment,
    parse_bool,
    parse_list,
)
from dl_verify.config.paths import Paths


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide an empty configuration directory."""
    return tmp_path / "config"


def write_settings(config_dir: Path, text: str) -> None:
    """Write a settings file into ``config_dir``."""
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "settings.conf").write_text(text, encoding="utf-8")


class TestGlobalConfigManager:
    """Tests for GlobalConfigManager."""

    def test_defaults_written_on_first_load(self, config_dir: Path) -> None:
        """Test a missing settings file is created with defaults."""
        config = GlobalConfigManager(config_dir).load_global_config()

        settings = config_dir / "settings.conf"
        assert settings.exists()
        text = settings.read_text(encoding="utf-8")
        assert text.startswith("# dl-verify Configuration")
        assert "[keyserver]" in text
        assert config["log_level"] == "INFO"
        assert config["console_log_level"] == "WARNING"
        assert config["network"] == {
            "retry_attempts": 3,
            "timeout_seconds": 10,
        }
        assert config["keyserver"] == {
            "servers": ["pgp.mit.edu"],
            "use_https": True,
            "use_hkp": False,
            "use_http": False,
            "include_defaults": True,
        }

    def test_written_file_round_trips(self, config_dir: Path) -> None:
        """Test saved settings are read back unchanged."""
        manager = GlobalConfigManager(config_dir)
        config = manager.load_global_config()
        config["keyserver"]["servers"] = ["a.example", "b.example"]
        config["keyserver"]["use_hkp"] = True
        config["network"]["retry_attempts"] = 5

        manager.save_global_config(config)

        assert manager.load_global_config() == config

    def test_user_values(self, config_dir: Path) -> None:
        """Test values from an existing file override defaults."""
        write_settings(
            config_dir,
            "[DEFAULT]\n"
            "log_level = debug\n"
            "[network]\n"
            "timeout_seconds = 30  # slow mirror\n"
            "[keyserver]\n"
            "servers = keys.example, keyserver.example\n"
            "use_https = no\n"
            "use_http = yes\n",
        )

        config = GlobalConfigManager(config_dir).load_global_config()

        assert config["log_level"] == "DEBUG"
        assert config["network"]["timeout_seconds"] == 30
        assert config["network"]["retry_attempts"] == 3
        assert config["keyserver"]["servers"] == [
            "keys.example",
            "keyserver.example",
        ]
        assert config["keyserver"]["use_https"] is False
        assert config["keyserver"]["use_http"] is True

    def test_invalid_values_fall_back(
        self, config_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test invalid values are replaced by defaults with a warning."""
        write_settings(
            config_dir,
            "[DEFAULT]\n"
            "console_log_level = LOUD\n"
            "[network]\n"
            "retry_attempts = many\n"
            "timeout_seconds = 0\n"
            "[keyserver]\n"
            "use_https = maybe\n",
        )

        with caplog.at_level("WARNING"):
            config = GlobalConfigManager(config_dir).load_global_config()

        assert config["console_log_level"] == "WARNING"
        assert config["network"]["retry_attempts"] == 3
        assert config["network"]["timeout_seconds"] == 10
        assert config["keyserver"]["use_https"] is True
        assert "Invalid integer" in caplog.text
        assert "must be positive" in caplog.text

    def test_unparseable_file_uses_defaults(
        self, config_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a broken file does not stop the program."""
        write_settings(config_dir, "this is not an ini file\n")

        with caplog.at_level("WARNING"):
            config = GlobalConfigManager(config_dir).load_global_config()

        assert config["network"]["retry_attempts"] == 3
        assert "Could not parse" in caplog.text


class TestConfigManager:
    """Tests for the ConfigManager facade."""

    def test_config_dir(self, config_dir: Path) -> None:
        """Test the custom directory is used."""
        assert ConfigManager(config_dir).config_dir == config_dir

    def test_default_dir(self) -> None:
        """Test the default directory is under ~/.config."""
        assert ConfigManager().config_dir == Paths.CONFIG_DIR

    def test_key_server_information_with_defaults(
        self, config_dir: Path
    ) -> None:
        """Test include_defaults adds the built-in servers."""
        manager = ConfigManager(config_dir)
        config = manager.load_global_config()
        config["keyserver"]["servers"] = ["keys.example"]

        info = ConfigManager.key_server_information(config)

        assert info.key_servers == ["keys.example", "pgp.mit.edu"]
        assert info.use_https
        assert not info.use_hkp

    def test_key_server_information_without_defaults(
        self, config_dir: Path
    ) -> None:
        """Test the built-in servers can be excluded."""
        config = ConfigManager(config_dir).load_global_config()
        config["keyserver"]["servers"] = ["keys.example"]
        config["keyserver"]["include_defaults"] = False

        info = ConfigManager.key_server_information(config)

        assert info.key_servers == ["keys.example"]


class TestParserHelpers:
    """Tests for INI parsing helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("value", "value"),
            ("  value  ", "value"),
            ("value  # comment", "value"),
            ("a#b", "a#b"),
        ],
    )
    def test_strip_inline_comment(self, value: str, expected: str) -> None:
        """Test comments need two spaces before the hash."""
        assert _strip_inline_comment(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("true", True),
            ("On", True),
            ("1", True),
            ("no", False),
            ("OFF", False),
            ("perhaps", None),
        ],
    )
    def test_parse_bool(self, value: str, expected: bool | None) -> None:
        """Test boolean spellings, with the default for unknown ones."""
        default = None
        assert parse_bool(value, default) is expected  # type: ignore[arg-type]

    def test_parse_list(self) -> None:
        """Test commas and whitespace both separate entries."""
        assert parse_list("a.example, b.example c.example,,") == [
            "a.example",
            "b.example",
            "c.example",
        ]
        assert parse_list("") == []

    def test_section_comments_cover_sections(self) -> None:
        """Test every written section has a comment block."""
        comments = ConfigCommentManager.get_section_comments()

        assert set(comments) == {"DEFAULT", "network", "keyserver"}

    def test_written_file_is_valid_ini(self, config_dir: Path) -> None:
        """Test the commented file parses with configparser."""
        GlobalConfigManager(config_dir).load_global_config()
        parser = configparser.ConfigParser()

        parser.read(config_dir / "settings.conf", encoding="utf-8")

        assert parser.get("network", "retry_attempts") == "3"
