"""
DirectoryGate environment descriptor.

Captures everything the back ends learn from the running system (platform,
sandbox markers, desktop portal reachability, OS version) in one value so it
can be built from the live OS or constructed directly in tests.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dirbridge.shared.gate import GateErrorHandler, GateLogger

_log = GateLogger.get("DirectoryGate")

FLATPAK_INFO_PATH = "/run/flatpak-info"
SNAP_ENV_VAR = "SNAP"

PORTAL_BUS_NAME = "org.freedesktop.portal.Desktop"
PORTAL_OBJECT_PATH = "/org/freedesktop/portal/desktop"
PORTAL_FILE_CHOOSER = "org.freedesktop.portal.FileChooser"


def detect_system(sys_platform: Optional[str] = None) -> str:
    """Map sys.platform onto a back end name."""
    sys_platform = sys_platform or sys.platform
    if sys_platform.startswith("linux"):
        return "linux"
    if sys_platform in ("win32", "cygwin"):
        return "windows"
    if sys_platform == "darwin":
        return "macos"
    return sys_platform


def in_flatpak(marker_path: str = FLATPAK_INFO_PATH) -> bool:
    """Flatpak mounts an info file into every sandbox."""
    return os.path.exists(marker_path)


def in_snap(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Snap sets SNAP to the snap's mount point."""
    environ = os.environ if environ is None else environ
    return bool(environ.get(SNAP_ENV_VAR))


@GateErrorHandler.wrap(
    "DirectoryGate", "portal detection", default_return=False, log_level=logging.WARNING
)
def portal_available() -> bool:
    """
    Check whether the desktop portal's FileChooser is reachable on the
    session bus.
    """
    gdbus = shutil.which("gdbus")
    if not gdbus:
        _log.debug("gdbus not found, assuming no desktop portal")
        return False

    result = subprocess.run(
        [
            gdbus, "introspect", "--session",
            "--dest", PORTAL_BUS_NAME,
            "--object-path", PORTAL_OBJECT_PATH,
        ],
        capture_output=True,
        text=True,
        timeout=5,
    )
    return result.returncode == 0 and PORTAL_FILE_CHOOSER in result.stdout


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """What the back ends need to know about the host system."""

    system: str
    in_flatpak: bool = False
    in_snap: bool = False
    portal_available: bool = False
    kernel_version: str = ""
    windows_version: Optional[Tuple[int, int]] = None
    mac_release: str = ""

    @property
    def is_sandboxed(self) -> bool:
        return self.in_flatpak or self.in_snap

    @classmethod
    def from_os(cls) -> "EnvironmentDescriptor":
        """Read the descriptor from the running system."""
        system = detect_system()
        flatpak = system == "linux" and in_flatpak()
        snap = system == "linux" and in_snap()

        # The portal is only worth a bus round trip inside a sandbox
        portal = (flatpak or snap) and portal_available()

        windows_version = None
        if system == "windows":
            info = sys.getwindowsversion()
            windows_version = (info.major, info.minor)

        descriptor = cls(
            system=system,
            in_flatpak=flatpak,
            in_snap=snap,
            portal_available=portal,
            kernel_version=platform.uname().version,
            windows_version=windows_version,
            mac_release=platform.mac_ver()[0] if system == "macos" else "",
        )
        _log.debug(f"Environment: {descriptor}")
        return descriptor


__all__ = [
    "EnvironmentDescriptor",
    "detect_system",
    "in_flatpak",
    "in_snap",
    "portal_available",
]
