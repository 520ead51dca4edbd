"""
Invocation Parsing for Sandbox-Util

The command line is positional:

    sandbox-util (--command|-c) NAME [ARGS...]
    sandbox-util (--file|-f) PATH [ARGS...]
    sandbox-util (--help|-h)

Everything after the target is forwarded to the confined program verbatim,
so the arguments are not run through a generic option parser.
"""

import os
from dataclasses import dataclass
from enum import Enum

HELP_SELECTORS = ("--help", "-h")


class ExecKind(str, Enum):
    """How the target identifier is interpreted."""
    COMMAND = "command"  # bare name looked up in the binary dir
    FILE = "file"  # path used verbatim


SELECTORS: dict[str, ExecKind] = {
    "--command": ExecKind.COMMAND,
    "-c": ExecKind.COMMAND,
    "--file": ExecKind.FILE,
    "-f": ExecKind.FILE,
}


class UsageError(Exception):
    """Raised when the command line is malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class HelpRequested(Exception):
    """Raised when the help selector is given."""


@dataclass(frozen=True)
class Invocation:
    """A validated command line."""
    kind: ExecKind
    target: str
    arguments: tuple[str, ...] = ()

    def exec_path(self, bin_dir: str) -> str:
        """Resolve the executable path the sandbox must expose."""
        if self.kind is ExecKind.COMMAND:
            return os.path.join(bin_dir, self.target)
        return self.target


def parse_invocation(argv: list[str]) -> Invocation:
    """
    Parse the arguments following the program name.

    Raises:
        HelpRequested: If the first argument is a help selector
        UsageError: If the selector or target is missing or the selector
            is not recognised
    """
    if argv and argv[0] in HELP_SELECTORS:
        raise HelpRequested()

    if len(argv) < 2 or not argv[0] or not argv[1]:
        raise UsageError("no params provided")

    selector, target = argv[0], argv[1]
    kind = SELECTORS.get(selector)
    if kind is None:
        raise UsageError(f"'{selector}' unrecognized argument")

    return Invocation(kind=kind, target=target, arguments=tuple(argv[2:]))
