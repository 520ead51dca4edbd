"""
Bubblewrap Backend for Sandbox-Util

This module renders directives as bwrap arguments and hands control to
bwrap by replacing the current process. Grants use the ``-try`` variants
so a path removed after compilation does not abort the launch.
"""

import logging
import os
import shlex

from ..config.settings import SandboxSettings
from ..schemas.directives import Directive, DirectiveType, SandboxPlan

logger = logging.getLogger(__name__)

TMPFS_PERMS = "555"


def directive_to_args(directive: Directive) -> list[str]:
    """
    Render one directive as bwrap arguments.

    Raises:
        ValueError: If the directive type has no bwrap rendering
    """
    d = directive
    kind = d.type

    if kind is DirectiveType.BIND_RW:
        return ["--bind-try", d.source, d.target]
    if kind is DirectiveType.BIND_RO:
        return ["--ro-bind-try", d.source, d.target]
    if kind is DirectiveType.DEV_BIND:
        flag = "--dev-bind" if d.required else "--dev-bind-try"
        return [flag, d.source, d.target]
    if kind is DirectiveType.TMPFS_CLEAR:
        return ["--perms", TMPFS_PERMS, "--tmpfs", d.target]
    if kind is DirectiveType.NULL_BIND_FILE:
        return ["--ro-bind-try", d.source, d.target]
    if kind is DirectiveType.REMOUNT_RO:
        return ["--remount-ro", d.target]
    if kind is DirectiveType.UNSET_ENV:
        return ["--unsetenv", d.value]
    if kind is DirectiveType.SET_HOSTNAME:
        return ["--hostname", d.value]
    if kind is DirectiveType.UNSHARE_FLAG:
        return [f"--unshare-{d.value}"]
    if kind is DirectiveType.CAP_DROP:
        return ["--cap-drop", d.value]
    if kind is DirectiveType.PROC_MOUNT:
        return ["--proc", d.target]
    if kind is DirectiveType.DEV_MINIMAL:
        return ["--dev", d.target]
    if kind is DirectiveType.SYMLINK:
        return ["--symlink", d.source, d.target]
    if kind is DirectiveType.NEW_SESSION:
        return ["--new-session"]
    if kind is DirectiveType.TERMINATOR:
        return ["--"]

    raise ValueError(f"No bwrap rendering for directive type: {kind}")


def to_bwrap_args(directives: tuple[Directive, ...] | list[Directive]) -> list[str]:
    """Render an ordered directive list as a flat bwrap argument list."""
    args: list[str] = []
    for directive in directives:
        args.extend(directive_to_args(directive))
    return args


def build_command(plan: SandboxPlan) -> list[str]:
    """
    Build the full argv for the backend.

    argv[0] is the resolved executable path, so the confined process
    reports the original command rather than bwrap.
    """
    return [
        plan.exec_path,
        *to_bwrap_args(plan.directives),
        plan.exec_target,
        *plan.arguments,
    ]


def exec_sandbox(plan: SandboxPlan, settings: SandboxSettings) -> None:
    """
    Replace the current process with bwrap running the plan.

    Does not return on success. An OSError from exec propagates to the
    caller; there is no retry under a relaxed policy.
    """
    argv = build_command(plan)
    logger.info("Executing %s %s", settings.bwrap_bin, shlex.join(argv))
    os.execve(settings.bwrap_bin, argv, settings.backend_env())
