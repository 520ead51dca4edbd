"""
Directive Sequencer for Sandbox-Util

Compilation happens in two phases that never interleave:

- Phase 1: content and grant directives, in emission order. Clearing a path
  (``nullify``) records it in the NullifiedPathSet.
- Phase 2: the executable grant, then one read-only remount per nullified
  path, then the list terminator.

A cleared path is remounted only after everything beneath it is mounted.
"""

from typing import Iterator

from ..schemas.directives import Directive

SANDBOX_ROOT = "/"


class NullifiedPathSet:
    """Insertion-ordered set of paths awaiting a read-only remount."""

    def __init__(self, *paths: str):
        self._paths: dict[str, None] = {}
        for path in paths:
            self.add(path)

    def add(self, path: str) -> None:
        self._paths.setdefault(path, None)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)


class DirectiveSequencer:
    """Append-only directive list with deferred read-only remounts."""

    def __init__(self, lock_root: bool = True):
        self._directives: list[Directive] = []
        self.nullified = NullifiedPathSet(SANDBOX_ROOT) if lock_root else NullifiedPathSet()
        self._finalized = False

    def emit(self, directive: Directive) -> None:
        """Append a phase 1 directive."""
        if self._finalized:
            raise RuntimeError("Directive list already finalized")
        self._directives.append(directive)

    def nullify(self, path: str) -> None:
        """Clear ``path`` now and lock it read-only in phase 2."""
        self.emit(Directive.tmpfs_clear(path))
        self.nullified.add(path)

    def finalize(self, executable: Directive | None = None) -> tuple[Directive, ...]:
        """
        Close phase 1 and build the ordered list.

        Args:
            executable: Grant for the target executable, placed after every
                other grant but before the remounts

        Returns:
            The complete, terminated directive list
        """
        if self._finalized:
            raise RuntimeError("Directive list already finalized")
        self._finalized = True

        ordered = list(self._directives)
        if executable is not None:
            ordered.append(executable)
        ordered.extend(Directive.remount_ro(path) for path in self.nullified)
        ordered.append(Directive.terminator())
        return tuple(ordered)
