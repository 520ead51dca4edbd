"""
Directive Compiler for Sandbox-Util

Maps every access family to primitive directives:
- Namespaces and process isolation
- Root area visibility (/usr, /etc, /tmp, /sys, /run, /var, ...)
- Runtime directory sockets (pipewire, pulseaudio, dconf, D-Bus)
- Devices (GPU, USB, shared memory)
- Home directory
- Display protocols (X11, Wayland)
- Free-form user path, device and socket lists

Each family asks the resolver once and compiles to one primitive. Grants
are only emitted for sources that exist on the host.
"""

import logging
import os
import posixpath
from typing import Callable

from ..config.settings import SandboxSettings
from ..policy.resolver import Capability, PolicyContext, PrecedenceResolver, TokenState
from ..policy.window import detect_window_system
from ..schemas.directives import Directive
from .sequencer import DirectiveSequencer

logger = logging.getLogger(__name__)

PathExists = Callable[[str], bool]

HOSTNAME = "sandbox"
LD_PRELOAD_FILE = "/etc/ld.so.preload"
RESOLVER_DIR = "/run/systemd/resolve"
X11_SOCKET_DIR = "/tmp/.X11-unix"
WAYLAND_SOCKET = "wayland-0"
DBUS_SYSTEM_SOCKET = "/run/dbus/system_bus_socket"
DBUS_SESSION_SOCKET = "bus"

# (capability, path) pairs hidden by nullifying, otherwise granted read-only
HIDEABLE_USR_DIRS = (
    (Capability.HIDE_USR, "/usr"),
    (Capability.HIDE_BIN, "/usr/bin"),
    (Capability.HIDE_SBIN, "/usr/sbin"),
    (Capability.HIDE_LIBEXEC, "/usr/libexec"),
)
LIB_DIRS = ("/usr/lib64", "/usr/lib")
MERGED_USR_SYMLINKS = (
    ("/usr/bin", "/bin"),
    ("/usr/sbin", "/sbin"),
    ("/usr/lib64", "/lib64"),
    ("/usr/lib", "/lib"),
)

# Runtime dir sockets exposed read-only when granted
RUNTIME_SOCKETS = (
    (Capability.ALLOW_PIPEWIRE, "pipewire-0"),
    (Capability.ALLOW_PULSEAUDIO, "pulse"),
)
DEVICE_GRANTS = (
    (Capability.ALLOW_GPU, "dri"),
    (Capability.ALLOW_USB, "usb"),
)


def beneath(base: str, name: str) -> str | None:
    """
    Join a list entry onto its base directory, never escaping it.

    Leading slashes are dropped and the entry is normalised; entries that
    resolve to the base itself or climb above it yield None.
    """
    relative = posixpath.normpath(name.lstrip("/"))
    if relative in (".", "") or relative == ".." or relative.startswith("../"):
        logger.warning("Ignoring entry outside %s: %s", base, name)
        return None
    return posixpath.join(base, relative)


class DirectiveCompiler:
    """
    Compiles a resolved policy into an ordered directive list.

    The compiler is pure over its inputs: the same tokens, settings and
    filesystem view always produce the same list.
    """

    def __init__(
        self,
        resolver: PrecedenceResolver,
        context: PolicyContext,
        settings: SandboxSettings,
        path_exists: PathExists | None = None,
    ):
        self.resolver = resolver
        self.context = context
        self.settings = settings
        self.path_exists = path_exists or os.path.exists

    def compile(self, exec_path: str) -> tuple[Directive, ...]:
        """
        Build the complete, ordered directive list.

        Args:
            exec_path: Resolved path of the executable to confine

        Returns:
            Ordered directives ending with the remounts and terminator
        """
        seq = DirectiveSequencer()

        self._compile_namespaces(seq)
        self._compile_root_area(seq)
        self._compile_sockets(seq)
        self._compile_devices(seq)
        self._compile_home(seq)
        self._compile_window_system(seq)
        self._compile_dbus(seq)

        # Outside the precedence system; the containing dir may be hidden
        executable = self._checked(Directive.bind_ro(exec_path))
        return seq.finalize(executable)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _enabled(self, capability: Capability) -> bool:
        return self.resolver.is_restriction_enabled(capability)

    def _allowed(self, capability: Capability) -> bool:
        return self.resolver.is_grant_allowed(capability)

    def _checked(self, directive: Directive) -> Directive | None:
        """Return the grant if its source exists, else None."""
        if not directive.is_grant:
            return directive
        if directive.source and self.path_exists(directive.source):
            return directive
        logger.debug("Skipping %s, source missing: %s", directive.type.value, directive.source)
        return None

    def _grant(self, seq: DirectiveSequencer, directive: Directive) -> None:
        checked = self._checked(directive)
        if checked is not None:
            seq.emit(checked)

    def _grant_ro(self, seq: DirectiveSequencer, path: str) -> None:
        self._grant(seq, Directive.bind_ro(path))

    def _grant_rw(self, seq: DirectiveSequencer, path: str) -> None:
        self._grant(seq, Directive.bind_rw(path))

    def _grant_writable(self, seq: DirectiveSequencer, path: str | None) -> None:
        """Read-write grant, downgraded to read-only in ephemeral mode."""
        if not path:
            return
        if self.context.is_ephemeral:
            self._grant_ro(seq, path)
        else:
            self._grant_rw(seq, path)

    def _home_path(self, name: str) -> str | None:
        if not self.settings.home:
            return None
        return beneath(self.settings.home, name)

    def _runtime_path(self, name: str) -> str | None:
        if not self.settings.runtime_dir:
            return None
        return beneath(self.settings.runtime_dir, name)

    # =========================================================================
    # Access families
    # =========================================================================

    def _compile_namespaces(self, seq: DirectiveSequencer) -> None:
        if self.context.permissive_mode:
            seq.emit(Directive.dev_bind("/", required=True))

        seq.emit(Directive.cap_drop("ALL"))
        seq.emit(Directive.unshare("user"))
        seq.emit(Directive.unshare("cgroup"))
        if self._enabled(Capability.UNSHARE_UTS):
            seq.emit(Directive.unshare("uts"))
            seq.emit(Directive.set_hostname(HOSTNAME))
        if self._enabled(Capability.UNSHARE_NETWORK):
            seq.emit(Directive.unshare("net"))
        if self._enabled(Capability.NEW_SESSION):
            seq.emit(Directive.new_session())

        seq.emit(Directive.proc_mount("/proc"))
        if self._enabled(Capability.UNSHARE_PROCESSES):
            seq.emit(Directive.unshare("pid"))

    def _compile_root_area(self, seq: DirectiveSequencer) -> None:
        if self._enabled(Capability.PREVENT_PRELOAD):
            seq.emit(Directive.null_bind_file(LD_PRELOAD_FILE))

        for capability, path in HIDEABLE_USR_DIRS:
            self._hide_or_grant_ro(seq, capability, path)
        for path in LIB_DIRS:
            self._grant_ro(seq, path)
        for source, target in MERGED_USR_SYMLINKS:
            seq.emit(Directive.symlink(source, target))

        self._hide_or_grant_ro(seq, Capability.HIDE_ETC, "/etc")

        if self._enabled(Capability.HIDE_TMP):
            seq.nullify("/tmp")
        elif self.context.is_ephemeral:
            seq.emit(Directive.tmpfs_clear("/tmp"))
        else:
            self._grant_rw(seq, "/tmp")

        self._hide_or_grant_ro(seq, Capability.HIDE_SYS, "/sys")

        if self._enabled(Capability.HIDE_RUN):
            seq.nullify("/run")
            # Keep name resolution on the host network
            if not self._enabled(Capability.UNSHARE_NETWORK):
                self._grant_ro(seq, RESOLVER_DIR)
        else:
            self._grant_ro(seq, "/run")

        self._hide_or_grant_ro(seq, Capability.HIDE_VAR, "/var")

        for path in self.settings.ro_access:
            self._grant_ro(seq, path)

    def _hide_or_grant_ro(self, seq: DirectiveSequencer, capability: Capability, path: str) -> None:
        if self._enabled(capability):
            seq.nullify(path)
        else:
            self._grant_ro(seq, path)

    def _compile_sockets(self, seq: DirectiveSequencer) -> None:
        runtime_dir = self.settings.runtime_dir
        if runtime_dir:
            if self._enabled(Capability.HIDE_SOCKETS):
                seq.nullify(runtime_dir)
            else:
                self._grant_ro(seq, runtime_dir)

        for capability, name in RUNTIME_SOCKETS:
            path = self._runtime_path(name)
            if path and self._allowed(capability):
                self._grant_ro(seq, path)

        dconf = self._runtime_path("dconf")
        if dconf and self._allowed(Capability.ALLOW_DCONF):
            self._grant_writable(seq, dconf)

        for name in self.settings.socket_access:
            path = self._runtime_path(name)
            if path:
                self._grant_ro(seq, path)

    def _compile_devices(self, seq: DirectiveSequencer) -> None:
        if self._enabled(Capability.HIDE_DEVICES):
            seq.emit(Directive.dev_minimal("/dev"))
        else:
            seq.emit(Directive.dev_bind("/dev", required=True))

        names = [name for capability, name in DEVICE_GRANTS if self._allowed(capability)]

        if self._allowed(Capability.ALLOW_SHM):
            names.append("shm")
        else:
            seq.nullify("/dev/shm")

        names.extend(self.settings.dev_access)

        granted: set[str] = set()
        for name in names:
            path = beneath("/dev", name)
            if path and path not in granted:
                granted.add(path)
                self._grant(seq, Directive.dev_bind(path))

    def _compile_home(self, seq: DirectiveSequencer) -> None:
        home = self.settings.home
        if not home:
            return

        if self.context.is_ephemeral:
            # Only an explicit protecthome keeps the real home visible
            if self.resolver.explicit_state(Capability.PROTECT_HOME) is TokenState.ENABLED:
                self._grant_ro(seq, home)
            else:
                seq.emit(Directive.tmpfs_clear(home))
        elif self._enabled(Capability.PROTECT_HOME):
            self._grant_ro(seq, home)
        else:
            self._grant_rw(seq, home)

        if self._allowed(Capability.ALLOW_DOWNLOADS):
            self._grant_writable(seq, self._home_path("Downloads"))

        for name in self.settings.home_rw_access:
            self._grant_writable(seq, self._home_path(name))

    def _compile_window_system(self, seq: DirectiveSequencer) -> None:
        window = self.context.window_system
        xauthority = self.settings.xauthority

        if window.allows_x11:
            if xauthority:
                self._grant_ro(seq, xauthority)
            self._grant_ro(seq, X11_SOCKET_DIR)
        else:
            seq.emit(Directive.unset_env("DISPLAY"))
            seq.emit(Directive.unset_env("XAUTHORITY"))
            if xauthority:
                seq.emit(Directive.null_bind_file(xauthority))
            seq.nullify(X11_SOCKET_DIR)

        wayland = self._runtime_path(WAYLAND_SOCKET)
        if window.allows_wayland:
            if wayland:
                self._grant_ro(seq, wayland)
        else:
            seq.emit(Directive.unset_env("WAYLAND_DISPLAY"))
            if wayland:
                seq.emit(Directive.null_bind_file(wayland))

    def _compile_dbus(self, seq: DirectiveSequencer) -> None:
        if not self._allowed(Capability.ALLOW_DBUS):
            return
        self._grant_ro(seq, DBUS_SYSTEM_SOCKET)
        session = self._runtime_path(DBUS_SESSION_SOCKET)
        if session:
            self._grant_ro(seq, session)


def compile_directives(
    settings: SandboxSettings,
    exec_path: str,
    path_exists: PathExists | None = None,
) -> tuple[Directive, ...]:
    """
    Resolve the policy described by ``settings`` and compile it.

    Args:
        settings: Environment snapshot
        exec_path: Resolved executable path
        path_exists: Host existence check for grant sources

    Returns:
        Ordered directive list
    """
    resolver = PrecedenceResolver(settings.tokens())
    window = detect_window_system(settings.window_system_override, settings.session_type)
    context = PolicyContext.from_resolver(resolver, window)
    compiler = DirectiveCompiler(resolver, context, settings, path_exists=path_exists)
    return compiler.compile(exec_path)
