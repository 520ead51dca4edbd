"""
Backend Module for Sandbox-Util

Serializes directives for bubblewrap and launches the confined process.
"""

from .bwrap import build_command, directive_to_args, exec_sandbox, to_bwrap_args

__all__ = [
    "build_command",
    "directive_to_args",
    "exec_sandbox",
    "to_bwrap_args",
]
