"""
Configuration Module for Sandbox-Util

This module provides configuration management including:
- Environment snapshot loading
- Logging setup
"""

from .settings import SandboxSettings, get_settings
from .logging_config import JSONFormatter, setup_logging

__all__ = [
    "SandboxSettings",
    "get_settings",
    "JSONFormatter",
    "setup_logging",
]
