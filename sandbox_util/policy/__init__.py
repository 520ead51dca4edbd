"""
Policy Module for Sandbox-Util

This module resolves capability tokens into policy decisions:
- tokens: parsing of delimiter separated capability lists
- resolver: restriction/grant precedence algebra
- window: effective display protocol detection
"""

from .tokens import TokenSet, parse_list
from .window import WindowSelection, WindowSystem, detect_window_system
from .resolver import (
    Capability,
    PolicyContext,
    PrecedenceResolver,
    TokenState,
)

__all__ = [
    # Tokens
    "TokenSet",
    "parse_list",
    # Window
    "WindowSelection",
    "WindowSystem",
    "detect_window_system",
    # Resolver
    "Capability",
    "PolicyContext",
    "PrecedenceResolver",
    "TokenState",
]
