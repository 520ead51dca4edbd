"""
Directive Schemas for Sandbox-Util

This module defines the Pydantic schemas for the primitive operations handed
to the confinement backend. A directive says what to do, not how a given
backend spells it; see ``sandbox_util.backend`` for the bwrap rendering.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DirectiveType(str, Enum):
    """Primitive confinement operations."""
    BIND_RW = "bind_rw"
    BIND_RO = "bind_ro"
    DEV_BIND = "dev_bind"
    TMPFS_CLEAR = "tmpfs_clear"
    NULL_BIND_FILE = "null_bind_file"
    REMOUNT_RO = "remount_ro"
    UNSET_ENV = "unset_env"
    SET_HOSTNAME = "set_hostname"
    UNSHARE_FLAG = "unshare_flag"
    CAP_DROP = "cap_drop"
    PROC_MOUNT = "proc_mount"
    DEV_MINIMAL = "dev_minimal"
    SYMLINK = "symlink"
    NEW_SESSION = "new_session"
    TERMINATOR = "terminator"


class Directive(BaseModel):
    """
    One backend operation.

    ``source`` and ``target`` are filled in for operations that take paths;
    ``value`` carries the argument of non-path operations (variable name,
    hostname, namespace, capability).
    """
    model_config = ConfigDict(frozen=True)

    type: DirectiveType
    source: str | None = Field(default=None, description="Host side path")
    target: str | None = Field(default=None, description="Sandbox side path")
    value: str | None = Field(default=None, description="Non-path argument")
    required: bool = Field(
        default=False,
        description="Fail instead of skipping when the source is missing",
    )

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def bind_rw(cls, path: str) -> "Directive":
        return cls(type=DirectiveType.BIND_RW, source=path, target=path)

    @classmethod
    def bind_ro(cls, path: str) -> "Directive":
        return cls(type=DirectiveType.BIND_RO, source=path, target=path)

    @classmethod
    def dev_bind(cls, path: str, required: bool = False) -> "Directive":
        return cls(type=DirectiveType.DEV_BIND, source=path, target=path, required=required)

    @classmethod
    def tmpfs_clear(cls, path: str) -> "Directive":
        return cls(type=DirectiveType.TMPFS_CLEAR, target=path)

    @classmethod
    def null_bind_file(cls, path: str) -> "Directive":
        return cls(type=DirectiveType.NULL_BIND_FILE, source="/dev/null", target=path)

    @classmethod
    def remount_ro(cls, path: str) -> "Directive":
        return cls(type=DirectiveType.REMOUNT_RO, target=path)

    @classmethod
    def unset_env(cls, name: str) -> "Directive":
        return cls(type=DirectiveType.UNSET_ENV, value=name)

    @classmethod
    def set_hostname(cls, hostname: str) -> "Directive":
        return cls(type=DirectiveType.SET_HOSTNAME, value=hostname)

    @classmethod
    def unshare(cls, namespace: str) -> "Directive":
        return cls(type=DirectiveType.UNSHARE_FLAG, value=namespace)

    @classmethod
    def cap_drop(cls, capability: str = "ALL") -> "Directive":
        return cls(type=DirectiveType.CAP_DROP, value=capability)

    @classmethod
    def proc_mount(cls, path: str = "/proc") -> "Directive":
        return cls(type=DirectiveType.PROC_MOUNT, target=path)

    @classmethod
    def dev_minimal(cls, path: str = "/dev") -> "Directive":
        return cls(type=DirectiveType.DEV_MINIMAL, target=path)

    @classmethod
    def symlink(cls, source: str, target: str) -> "Directive":
        return cls(type=DirectiveType.SYMLINK, source=source, target=target)

    @classmethod
    def new_session(cls) -> "Directive":
        return cls(type=DirectiveType.NEW_SESSION)

    @classmethod
    def terminator(cls) -> "Directive":
        return cls(type=DirectiveType.TERMINATOR)

    @property
    def is_grant(self) -> bool:
        """Whether this directive exposes host content into the sandbox."""
        return self.type in (DirectiveType.BIND_RW, DirectiveType.BIND_RO, DirectiveType.DEV_BIND)


class SandboxPlan(BaseModel):
    """Everything the backend needs to launch the confined process."""
    model_config = ConfigDict(frozen=True)

    directives: tuple[Directive, ...] = Field(description="Ordered directive list")
    exec_path: str = Field(description="Resolved executable path")
    exec_target: str = Field(description="Name or path the backend runs")
    arguments: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Passthrough arguments, forwarded verbatim",
    )
