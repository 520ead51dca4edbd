"""
Settings Configuration for Sandbox-Util

This module captures the environment the sandbox is built from:
- Capability lists (application defaults and user overrides)
- Free-form path, device and socket access lists
- Ambient session context (home, runtime dir, X authority, session type)

The snapshot is taken once at start and never re-read, so nothing can
change the inputs while the policy is being resolved.
"""

import os
from dataclasses import dataclass, field

from ..policy.tokens import TokenSet, parse_list

DEFAULT_BWRAP_BIN = "/usr/bin/bwrap"
DEFAULT_BIN_DIR = "/usr/bin"
SANDBOX_PATH = "/bin:/usr/bin"


@dataclass(frozen=True)
class SandboxSettings:
    """Immutable snapshot of every environment input."""

    # Capability sources
    application_params: str = ""
    user_params: str = ""

    # Free-form access lists
    home_rw_access: tuple[str, ...] = ()
    ro_access: tuple[str, ...] = ()
    dev_access: tuple[str, ...] = ()
    socket_access: tuple[str, ...] = ()

    # Window system
    window_system_override: str = ""
    session_type: str = ""

    # Ambient paths
    home: str = ""
    runtime_dir: str = ""
    xauthority: str = ""

    # Backend
    bwrap_bin: str = DEFAULT_BWRAP_BIN
    bin_dir: str = DEFAULT_BIN_DIR
    sandbox_path: str = SANDBOX_PATH

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"

    extra_env: dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "SandboxSettings":
        """Load settings from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            application_params=env.get("SB_APPLICATION_SANDBOX_PARAMS", ""),
            user_params=env.get("SB_USER_SANDBOX_PARAMS", ""),
            home_rw_access=parse_list(env.get("SB_HOME_RW_ACCESS")),
            ro_access=parse_list(env.get("SB_RO_ACCESS")),
            dev_access=parse_list(env.get("SB_DEV_ACCESS")),
            socket_access=parse_list(env.get("SB_SOCKET_ACCESS")),
            window_system_override=env.get("SB_WINDOW_SYSTEM", ""),
            session_type=env.get("XDG_SESSION_TYPE", ""),
            home=env.get("HOME", ""),
            runtime_dir=env.get("XDG_RUNTIME_DIR", ""),
            xauthority=env.get("XAUTHORITY", ""),
            bwrap_bin=env.get("SB_BWRAP_BIN", DEFAULT_BWRAP_BIN),
            log_level=env.get("LOG_LEVEL", "WARNING").upper(),
            log_format=env.get("LOG_FORMAT", "text").lower(),
            extra_env=dict(env),
        )

    def tokens(self) -> TokenSet:
        """Merged capability token set."""
        return TokenSet.from_sources(self.application_params, self.user_params)

    def validate(self) -> list[str]:
        """
        Validate settings.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.home and not os.path.isabs(self.home):
            errors.append("HOME should be an absolute path")

        if self.runtime_dir and not os.path.isabs(self.runtime_dir):
            errors.append("XDG_RUNTIME_DIR should be an absolute path")

        if self.xauthority and not os.path.isabs(self.xauthority):
            errors.append("XAUTHORITY should be an absolute path")

        if self.log_format not in ("json", "text"):
            errors.append("LOG_FORMAT must be 'json' or 'text'")

        return errors

    def is_valid(self) -> bool:
        """Check if settings are valid."""
        return len(self.validate()) == 0

    def backend_env(self) -> dict[str, str]:
        """Environment for the backend process, with PATH pinned."""
        env = dict(self.extra_env)
        env["PATH"] = self.sandbox_path
        return env

    def to_dict(self) -> dict[str, object]:
        """Convert settings to dictionary for logging."""
        return {
            "params": {
                "application": self.application_params,
                "user": self.user_params,
            },
            "access": {
                "home_rw": list(self.home_rw_access),
                "ro": list(self.ro_access),
                "dev": list(self.dev_access),
                "socket": list(self.socket_access),
            },
            "window": {
                "override": self.window_system_override,
                "session_type": self.session_type,
            },
            "paths": {
                "home": self.home,
                "runtime_dir": self.runtime_dir,
                "xauthority": self.xauthority,
            },
            "bwrap_bin": self.bwrap_bin,
        }


_settings: SandboxSettings | None = None


def get_settings() -> SandboxSettings:
    """
    Get the global settings instance.

    Settings are loaded from environment variables on first access.
    """
    global _settings
    if _settings is None:
        _settings = SandboxSettings.from_env()
    return _settings

