"""
Sandbox-Util: Capability Policy Compiler for Bubblewrap

Sandbox-Util resolves a set of capability tokens (application defaults
merged with user overrides) against the current session and compiles the
result into an ordered list of bubblewrap directives.

Core Components:
- policy: token parsing, precedence resolution, window system detection
- schemas: Pydantic directive models
- compiler: directive compilation and sequencing
- backend: bwrap argument rendering and launch
- config: environment snapshot and logging

Usage:
    from sandbox_util import SandboxSettings, compile_directives
    directives = compile_directives(SandboxSettings.from_env(), "/usr/bin/foo")
"""

__version__ = "0.1.0"

from .policy import (
    Capability,
    PolicyContext,
    PrecedenceResolver,
    TokenSet,
    TokenState,
    WindowSelection,
    WindowSystem,
    detect_window_system,
    parse_list,
)

from .schemas import (
    Directive,
    DirectiveType,
    SandboxPlan,
)

from .compiler import (
    DirectiveCompiler,
    DirectiveSequencer,
    NullifiedPathSet,
    compile_directives,
)

from .config import SandboxSettings

__all__ = [
    # Version
    "__version__",
    # Policy
    "Capability",
    "PolicyContext",
    "PrecedenceResolver",
    "TokenSet",
    "TokenState",
    "WindowSelection",
    "WindowSystem",
    "detect_window_system",
    "parse_list",
    # Schemas
    "Directive",
    "DirectiveType",
    "SandboxPlan",
    # Compiler
    "DirectiveCompiler",
    "DirectiveSequencer",
    "NullifiedPathSet",
    "compile_directives",
    # Config
    "SandboxSettings",
]
