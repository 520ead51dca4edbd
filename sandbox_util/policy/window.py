"""
Window System Detection for Sandbox-Util

Picks the display protocol the sandbox is allowed to reach:
- A valid ``SB_WINDOW_SYSTEM`` override wins
- Anything else falls back to the session type reported by the desktop
"""

from dataclasses import dataclass
from enum import Enum


class WindowSystem(str, Enum):
    """Display protocols the compiler knows how to expose."""
    X11 = "x11"
    WAYLAND = "wayland"
    NONE = "none"
    ANY = "any"

    @property
    def allows_x11(self) -> bool:
        return self in (WindowSystem.X11, WindowSystem.ANY)

    @property
    def allows_wayland(self) -> bool:
        return self in (WindowSystem.WAYLAND, WindowSystem.ANY)


VALID_OVERRIDES = frozenset(w.value for w in WindowSystem)


@dataclass(frozen=True)
class WindowSelection:
    """The resolved name as given, and the protocol it maps to."""
    name: str
    system: WindowSystem


def detect_window_system(override: str | None, session_type: str | None) -> WindowSelection:
    """
    Resolve the effective window system.

    Args:
        override: Explicit choice; only ``none``, ``any``, ``x11`` and
            ``wayland`` are honoured
        session_type: Ambient hint (usually ``XDG_SESSION_TYPE``), used
            verbatim even when unrecognised

    Returns:
        WindowSelection; names other than the known protocols map to NONE
    """
    if override in VALID_OVERRIDES:
        name = override
    else:
        name = session_type or ""

    try:
        system = WindowSystem(name)
    except ValueError:
        system = WindowSystem.NONE
    return WindowSelection(name=name, system=system)
