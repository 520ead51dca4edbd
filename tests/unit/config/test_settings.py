"""Unit tests for settings and logging configuration."""

import json
import logging

from sandbox_util.config.logging_config import JSONFormatter, setup_logging
from sandbox_util.config import settings as settings_module
from sandbox_util.config.settings import SandboxSettings, get_settings


class TestSandboxSettings:
    """Tests for SandboxSettings."""

    def test_defaults(self):
        """Test default settings values."""
        settings = SandboxSettings()
        assert settings.bwrap_bin == "/usr/bin/bwrap"
        assert settings.bin_dir == "/usr/bin"
        assert settings.home_rw_access == ()
        assert settings.log_level == "WARNING"

    def test_from_env(self):
        """Test loading every input from an environment mapping."""
        settings = SandboxSettings.from_env({
            "SB_APPLICATION_SANDBOX_PARAMS": "hidetmp,allowgpu",
            "SB_USER_SANDBOX_PARAMS": "noallowgpu",
            "SB_HOME_RW_ACCESS": ".config/app,,Documents",
            "SB_RO_ACCESS": "/opt/tool",
            "SB_DEV_ACCESS": "video0",
            "SB_SOCKET_ACCESS": "app.sock",
            "SB_WINDOW_SYSTEM": "x11",
            "XDG_SESSION_TYPE": "wayland",
            "HOME": "/home/user",
            "XDG_RUNTIME_DIR": "/run/user/1000",
            "XAUTHORITY": "/home/user/.Xauthority",
            "LOG_LEVEL": "debug",
        })
        assert settings.home_rw_access == (".config/app", "Documents")
        assert settings.ro_access == ("/opt/tool",)
        assert settings.dev_access == ("video0",)
        assert settings.socket_access == ("app.sock",)
        assert settings.window_system_override == "x11"
        assert settings.session_type == "wayland"
        assert settings.runtime_dir == "/run/user/1000"
        assert settings.log_level == "DEBUG"

        tokens = settings.tokens()
        assert "hidetmp" in tokens
        assert "noallowgpu" in tokens

    def test_validate(self):
        """Test relative ambient paths are reported."""
        settings = SandboxSettings(home="home", runtime_dir="run", log_format="xml")
        errors = settings.validate()
        assert len(errors) == 3
        assert not settings.is_valid()
        assert SandboxSettings(home="/home/user").is_valid()

    def test_backend_env_pins_path(self):
        """Test the backend environment overrides PATH only."""
        settings = SandboxSettings(extra_env={"PATH": "/usr/local/bin", "LANG": "C"})
        env = settings.backend_env()
        assert env == {"PATH": "/bin:/usr/bin", "LANG": "C"}
        assert settings.extra_env["PATH"] == "/usr/local/bin"

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = SandboxSettings(home="/home/user").to_dict()
        assert data["paths"]["home"] == "/home/user"
        assert data["bwrap_bin"] == "/usr/bin/bwrap"

    def test_global_settings(self, monkeypatch):
        """Test the environment is captured once and then cached."""
        monkeypatch.setattr(settings_module, "_settings", None)
        monkeypatch.setenv("SB_RO_ACCESS", "/opt/a")
        settings = get_settings()
        assert settings.ro_access == ("/opt/a",)

        monkeypatch.setenv("SB_RO_ACCESS", "/opt/b")
        assert get_settings() is settings
        assert get_settings().ro_access == ("/opt/a",)


class TestLogging:
    """Tests for logging setup."""

    def test_setup_text(self):
        """Test text logging setup."""
        logger = setup_logging("debug", "text")
        assert logger.name == "sandbox_util"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_json(self):
        """Test JSON logging setup replaces handlers."""
        setup_logging("info", "json")
        logger = setup_logging("info", "json")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_json_formatter(self):
        """Test JSON records carry level and message."""
        record = logging.LogRecord("sandbox_util.x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")
