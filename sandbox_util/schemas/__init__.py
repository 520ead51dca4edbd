"""
Schemas for Sandbox-Util

Pydantic models passed between the compiler and the backend.
"""

from .directives import Directive, DirectiveType, SandboxPlan

__all__ = [
    "Directive",
    "DirectiveType",
    "SandboxPlan",
]
