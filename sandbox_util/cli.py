"""
CLI for Sandbox-Util

This module provides the command-line entry point: parse the invocation,
resolve the policy from the environment, compile it and hand over to bwrap.
"""

import logging
import sys

from rich.console import Console
from rich.table import Table

from .backend.bwrap import exec_sandbox
from .compiler.compiler import compile_directives
from .config.logging_config import setup_logging
from .config.settings import SandboxSettings, get_settings
from .invocation import HelpRequested, UsageError, parse_invocation
from .schemas.directives import SandboxPlan

console = Console(stderr=True)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1


def print_help() -> None:
    """Print usage and the environment variables that shape the sandbox."""
    console.print("[bold]Usage:[/bold] sandbox-util (--command|-c NAME | --file|-f PATH) [ARGS...]")
    console.print()

    table = Table(title="Environment", show_header=True, header_style="bold")
    table.add_column("Variable")
    table.add_column("Meaning")
    table.add_row("SB_APPLICATION_SANDBOX_PARAMS", "Application default capabilities")
    table.add_row("SB_USER_SANDBOX_PARAMS", "User capability overrides")
    table.add_row("SB_HOME_RW_ACCESS", "HOME relative read-write paths")
    table.add_row("SB_RO_ACCESS", "Paths granted read-only")
    table.add_row("SB_DEV_ACCESS", "Devices under /dev to expose")
    table.add_row("SB_SOCKET_ACCESS", "XDG_RUNTIME_DIR relative sockets")
    table.add_row("SB_WINDOW_SYSTEM", "none, any, x11 or wayland")
    console.print(table)


def build_plan(argv: list[str], settings: SandboxSettings) -> SandboxPlan:
    """
    Parse ``argv`` and compile the sandbox plan.

    Raises:
        HelpRequested: If help was asked for
        UsageError: If the arguments are malformed
    """
    invocation = parse_invocation(argv)
    exec_path = invocation.exec_path(settings.bin_dir)
    directives = compile_directives(settings, exec_path)
    return SandboxPlan(
        directives=directives,
        exec_path=exec_path,
        exec_target=invocation.target,
        arguments=invocation.arguments,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    try:
        plan = build_plan(argv, settings)
    except HelpRequested:
        print_help()
        return EXIT_OK
    except UsageError as e:
        console.print(f"[red]ERROR: {e.message}[/red]")
        return EXIT_USAGE

    logger.debug("Settings: %s", settings.to_dict())
    if not settings.is_valid():
        for problem in settings.validate():
            logger.warning(problem)

    exec_sandbox(plan, settings)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
