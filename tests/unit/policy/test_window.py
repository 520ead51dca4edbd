"""Unit tests for window system detection."""

import pytest

from sandbox_util.policy.window import WindowSystem, detect_window_system


class TestDetectWindowSystem:
    """Tests for detect_window_system."""

    def test_override_wins(self):
        """Test that a valid override beats the session type."""
        selection = detect_window_system("wayland", "x11")
        assert selection.system is WindowSystem.WAYLAND
        assert selection.name == "wayland"

    @pytest.mark.parametrize("override", ["none", "any", "x11", "wayland"])
    def test_all_valid_overrides(self, override):
        """Test each valid override is honoured."""
        assert detect_window_system(override, "tty").name == override

    def test_invalid_override_falls_back(self):
        """Test that an invalid override uses the session type verbatim."""
        selection = detect_window_system("framebuffer", "x11")
        assert selection.name == "x11"
        assert selection.system is WindowSystem.X11

    def test_missing_override_falls_back(self):
        """Test that an empty override uses the session type."""
        assert detect_window_system("", "wayland").system is WindowSystem.WAYLAND
        assert detect_window_system(None, "wayland").system is WindowSystem.WAYLAND

    def test_unrecognised_session_type_kept_verbatim(self):
        """Test that an unknown session type is kept but maps to NONE."""
        selection = detect_window_system(None, "tty")
        assert selection.name == "tty"
        assert selection.system is WindowSystem.NONE

    def test_match_is_case_sensitive(self):
        """Test that only exact protocol names are recognised."""
        selection = detect_window_system("X11", "X11")
        assert selection.system is WindowSystem.NONE


class TestWindowSystem:
    """Tests for WindowSystem protocol checks."""

    def test_any_allows_both(self):
        """Test that ANY exposes both protocols."""
        assert WindowSystem.ANY.allows_x11
        assert WindowSystem.ANY.allows_wayland

    def test_none_allows_neither(self):
        """Test that NONE exposes no protocol."""
        assert not WindowSystem.NONE.allows_x11
        assert not WindowSystem.NONE.allows_wayland

    def test_single_protocols(self):
        """Test X11 and Wayland expose only themselves."""
        assert WindowSystem.X11.allows_x11 and not WindowSystem.X11.allows_wayland
        assert WindowSystem.WAYLAND.allows_wayland and not WindowSystem.WAYLAND.allows_x11
