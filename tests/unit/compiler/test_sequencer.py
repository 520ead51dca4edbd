"""Unit tests for the directive sequencer."""

import pytest

from sandbox_util.compiler.sequencer import DirectiveSequencer, NullifiedPathSet
from sandbox_util.schemas.directives import Directive, DirectiveType


class TestNullifiedPathSet:
    """Tests for NullifiedPathSet."""

    def test_keeps_first_seen_order(self):
        """Test insertion order is preserved."""
        paths = NullifiedPathSet("/", "/tmp")
        paths.add("/usr")
        assert list(paths) == ["/", "/tmp", "/usr"]

    def test_deduplicates(self):
        """Test adding a path twice keeps one entry."""
        paths = NullifiedPathSet()
        paths.add("/tmp")
        paths.add("/tmp")
        assert len(paths) == 1
        assert "/tmp" in paths


class TestDirectiveSequencer:
    """Tests for DirectiveSequencer."""

    def test_root_is_locked_by_default(self):
        """Test the sandbox root gets a read-only remount."""
        directives = DirectiveSequencer().finalize()
        assert directives == (Directive.remount_ro("/"), Directive.terminator())

    def test_root_lock_can_be_disabled(self):
        """Test lock_root=False leaves only the terminator."""
        assert DirectiveSequencer(lock_root=False).finalize() == (Directive.terminator(),)

    def test_nullify_emits_clear_now_and_remount_last(self):
        """Test nullify clears immediately and remounts after everything."""
        seq = DirectiveSequencer(lock_root=False)
        seq.nullify("/tmp")
        seq.emit(Directive.bind_ro("/tmp/.X11-unix"))
        directives = seq.finalize(Directive.bind_ro("/tmp/app"))

        assert directives == (
            Directive.tmpfs_clear("/tmp"),
            Directive.bind_ro("/tmp/.X11-unix"),
            Directive.bind_ro("/tmp/app"),
            Directive.remount_ro("/tmp"),
            Directive.terminator(),
        )

    def test_one_remount_per_path(self):
        """Test a path nullified twice is remounted once."""
        seq = DirectiveSequencer()
        seq.nullify("/usr")
        seq.nullify("/usr")
        directives = seq.finalize()
        remounts = [d.target for d in directives if d.type is DirectiveType.REMOUNT_RO]
        assert remounts == ["/", "/usr"]

    def test_executable_precedes_remounts(self):
        """Test the executable grant comes before the remount phase."""
        seq = DirectiveSequencer()
        seq.nullify("/usr/bin")
        directives = seq.finalize(Directive.bind_ro("/usr/bin/app"))
        types = [d.type for d in directives]
        assert types.index(DirectiveType.BIND_RO) < types.index(DirectiveType.REMOUNT_RO)
        assert types[-1] is DirectiveType.TERMINATOR

    def test_finalize_once(self):
        """Test the list cannot be extended or finalized again."""
        seq = DirectiveSequencer()
        seq.finalize()
        with pytest.raises(RuntimeError):
            seq.emit(Directive.bind_ro("/etc"))
        with pytest.raises(RuntimeError):
            seq.finalize()
