"""
Precedence Resolver for Sandbox-Util

This module answers, per capability, whether a restriction is enforced or a
grant is allowed. The rules, from strongest to weakest:

1. An explicit ``no<capability>`` token always denies
2. An explicit ``<capability>`` token enables
3. The global ``sandbox`` / ``nosandbox`` switches shift the default
4. The implicit default (restrictions on, grants off)

Each capability is evaluated on its own; a global switch never cancels
another capability's explicit token.
"""

from dataclasses import dataclass
from enum import Enum

from .tokens import TokenSet
from .window import WindowSelection, WindowSystem

NEGATION_PREFIX = "no"


class Capability(str, Enum):
    """Capability tokens understood by the compiler."""

    # Global switches
    SANDBOX = "sandbox"
    NOSANDBOX = "nosandbox"

    # Namespaces and process
    UNSHARE_UTS = "unshareuts"
    UNSHARE_NETWORK = "unsharenetwork"
    NEW_SESSION = "newsession"
    UNSHARE_PROCESSES = "unshareprocesses"

    # Root area
    PREVENT_PRELOAD = "preventpreload"
    HIDE_USR = "hideusr"
    HIDE_BIN = "hidebin"
    HIDE_SBIN = "hidesbin"
    HIDE_LIBEXEC = "hidelibexec"
    HIDE_ETC = "hideetc"
    HIDE_TMP = "hidetmp"
    HIDE_SYS = "hidesys"
    HIDE_RUN = "hiderun"
    HIDE_VAR = "hidevar"

    # Runtime dir, devices, home
    HIDE_SOCKETS = "hidesockets"
    HIDE_DEVICES = "hidedevices"
    PROTECT_HOME = "protecthome"

    # Grants
    EPHEMERAL = "ephemeral"
    ALLOW_PIPEWIRE = "allowpipewire"
    ALLOW_PULSEAUDIO = "allowpulseaudio"
    ALLOW_DCONF = "allowdconf"
    ALLOW_GPU = "allowgpu"
    ALLOW_USB = "allowusb"
    ALLOW_SHM = "allowshm"
    ALLOW_DOWNLOADS = "allowdownloads"
    ALLOW_DBUS = "allowdbus"


class TokenState(str, Enum):
    """Explicit per-capability resolution, before defaults apply."""
    ENABLED = "enabled"
    DISABLED = "disabled"
    DEFAULT = "default"


def _name(capability: Capability | str) -> str:
    if isinstance(capability, Capability):
        return capability.value
    return capability


class PrecedenceResolver:
    """
    Pure query engine over an immutable token set.

    Queries accept a ``Capability`` or any plain string, so names the
    compiler does not know about resolve without error.
    """

    def __init__(self, tokens: TokenSet):
        self.tokens = tokens

    @property
    def strict_mode(self) -> bool:
        return Capability.SANDBOX in self.tokens

    @property
    def permissive_mode(self) -> bool:
        return Capability.NOSANDBOX in self.tokens

    def explicit_state(self, capability: Capability | str) -> TokenState:
        """Resolve only the per-capability tokens; deny beats enable."""
        name = _name(capability)
        if NEGATION_PREFIX + name in self.tokens:
            return TokenState.DISABLED
        if name in self.tokens:
            return TokenState.ENABLED
        return TokenState.DEFAULT

    def is_restriction_enabled(self, capability: Capability | str) -> bool:
        """Restrictions are on unless explicitly negated or bulk-disabled."""
        state = self.explicit_state(capability)
        if state is TokenState.DISABLED:
            return False
        if state is TokenState.ENABLED:
            return True
        if self.strict_mode:
            return True
        return not self.permissive_mode

    def is_grant_allowed(self, capability: Capability | str) -> bool:
        """Grants need an explicit token and are refused in strict mode."""
        if self.strict_mode:
            return False
        return self.explicit_state(capability) is TokenState.ENABLED


@dataclass(frozen=True)
class PolicyContext:
    """Ambient snapshot the compiler consults alongside the resolver."""

    strict_mode: bool
    permissive_mode: bool
    is_ephemeral: bool
    window: WindowSelection

    @property
    def window_system(self) -> WindowSystem:
        return self.window.system

    @classmethod
    def from_resolver(cls, resolver: PrecedenceResolver, window: WindowSelection) -> "PolicyContext":
        return cls(
            strict_mode=resolver.strict_mode,
            permissive_mode=resolver.permissive_mode,
            is_ephemeral=resolver.is_grant_allowed(Capability.EPHEMERAL),
            window=window,
        )
