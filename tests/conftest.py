"""Shared fixtures for sandbox-util tests."""

import pytest

from sandbox_util.config.settings import SandboxSettings


@pytest.fixture
def settings():
    """Settings for a typical desktop session."""
    return SandboxSettings(
        home="/home/user",
        runtime_dir="/run/user/1000",
        xauthority="/run/user/1000/.Xauthority",
        session_type="wayland",
    )
