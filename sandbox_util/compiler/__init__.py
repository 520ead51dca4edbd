"""
Compiler Module for Sandbox-Util

This module turns a resolved policy into backend directives:
- compiler: per access family compilation
- sequencer: two-phase ordering with deferred read-only remounts
"""

from .compiler import DirectiveCompiler, compile_directives
from .sequencer import DirectiveSequencer, NullifiedPathSet

__all__ = [
    "DirectiveCompiler",
    "compile_directives",
    "DirectiveSequencer",
    "NullifiedPathSet",
]
