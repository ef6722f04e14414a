"""
DirectoryGate platform back ends.

Every back end exposes the same capability set. Filesystem operations are
shared (see operations.py); back ends differ in the version string and in
which native folder choosers they try, and in what order.
"""

from __future__ import annotations

from functools import partial
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

from dirbridge.shared.gate import GateLogger

from . import operations
from .dialogs import (
    DialogUnavailableError,
    LINUX_DIALOG_TOOLS,
    pick_folder_linux_tool,
    pick_folder_osascript,
    pick_folder_tk,
    pick_folder_win32,
)
from .environment import EnvironmentDescriptor
from .models import MethodResponse

_log = GateLogger.get("DirectoryGate")

Chooser = Callable[[str], Optional[str]]

DEFAULT_DIALOG_TITLE = "Select Directory"


@runtime_checkable
class PlatformBackend(Protocol):
    """Contract every platform back end implements."""

    name: str

    def platform_version(self) -> str: ...
    def select_directory(self) -> Optional[str]: ...
    def has_permission(self, directory_path: str) -> bool: ...
    def request_permission(self, directory_path: str) -> bool: ...
    def write_file(self, directory_path: str, file_name: str, content: str) -> MethodResponse: ...
    def list_directory(self, directory_path: str, recursive: bool = False) -> MethodResponse: ...
    def read_file(self, file_path: str) -> MethodResponse: ...
    def get_directory_details(
        self, directory_path: str, recursive: bool = False, strict: bool = False
    ) -> MethodResponse: ...
    def available_choosers(self) -> List[str]: ...


class BaseBackend:
    """
    Back end for systems without a dedicated implementation.

    Subclasses override platform_version() and _chooser_chain().
    """

    name = "generic"

    # True on platforms that can prompt the user to grant access to a
    # directory; request_permission() then prompts before checking.
    supports_interactive_grant = False

    def __init__(
        self,
        environment: EnvironmentDescriptor,
        dialog_backend: str = "auto",
        dialog_title: str = DEFAULT_DIALOG_TITLE,
        probe_prefix: str = operations.DEFAULT_PROBE_PREFIX,
    ):
        self.environment = environment
        self.dialog_backend = dialog_backend or "auto"
        self.dialog_title = dialog_title or DEFAULT_DIALOG_TITLE
        self.probe_prefix = probe_prefix or operations.DEFAULT_PROBE_PREFIX

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialog_backend={self.dialog_backend!r})"

    # ==================== Platform ====================

    def platform_version(self) -> str:
        return f"{self.environment.system} {self.environment.kernel_version}".strip()

    # ==================== Directory picker ====================

    def _chooser_chain(self) -> List[Tuple[str, Chooser]]:
        return [("tk", pick_folder_tk)]

    def _choosers(self) -> List[Tuple[str, Chooser]]:
        """Chooser chain with the configured chooser moved to the front."""
        chain = self._chooser_chain()
        if self.dialog_backend == "auto":
            return chain

        preferred = [c for c in chain if c[0] == self.dialog_backend]
        if not preferred:
            _log.warning(
                f"Dialog backend '{self.dialog_backend}' is not supported by "
                f"the {self.name} back end, using defaults"
            )
        return preferred + [c for c in chain if c[0] != self.dialog_backend]

    def available_choosers(self) -> List[str]:
        return [name for name, _ in self._choosers()]

    def select_directory(self) -> Optional[str]:
        """
        Show a modal folder chooser.

        Tries each chooser until one can be shown. Returns the chosen path,
        or None when the user cancels or no chooser works.
        """
        for chooser_name, chooser in self._choosers():
            try:
                selected = chooser(self.dialog_title)
            except DialogUnavailableError as e:
                _log.info(f"Folder chooser '{chooser_name}' unavailable: {e}")
                continue

            if selected:
                _log.debug(f"Directory selected with {chooser_name}: {selected}")
            else:
                _log.debug(f"Directory selection cancelled in {chooser_name}")
            return selected

        _log.warning("No folder chooser could be shown")
        return None

    # ==================== Permissions ====================

    def has_permission(self, directory_path: str) -> bool:
        return operations.probe_write_access(directory_path, self.probe_prefix)

    def prompt_for_access(self, directory_path: str) -> None:
        """
        Ask the user to grant access to a directory.

        Called by request_permission() only when supports_interactive_grant
        is set; subclasses that set the flag must override this.
        """
        raise NotImplementedError(f"{self.name} back end cannot prompt for access")

    def request_permission(self, directory_path: str) -> bool:
        """
        Request write access to a directory.

        None of the built-in back ends can grant access interactively, so on
        them this is the same check as has_permission().
        """
        if self.supports_interactive_grant:
            self.prompt_for_access(directory_path)
        return self.has_permission(directory_path)

    # ==================== Files ====================

    def write_file(self, directory_path: str, file_name: str, content: str) -> MethodResponse:
        return operations.write_file(directory_path, file_name, content, self.probe_prefix)

    def read_file(self, file_path: str) -> MethodResponse:
        return operations.read_file(file_path)

    # ==================== Directories ====================

    def list_directory(self, directory_path: str, recursive: bool = False) -> MethodResponse:
        return operations.list_directory(directory_path, recursive)

    def get_directory_details(
        self,
        directory_path: str,
        recursive: bool = False,
        strict: bool = False,
    ) -> MethodResponse:
        return operations.get_directory_details(directory_path, recursive, strict)


class LinuxBackend(BaseBackend):
    """Linux desktops, including Flatpak and Snap sandboxes."""

    name = "linux"

    def platform_version(self) -> str:
        return f"Linux {self.environment.kernel_version}"

    def _pick_via_portal(self, title: str) -> Optional[str]:
        # The asynchronous portal request/response handshake is not
        # implemented. Sandboxed dialogs below go through the portal on
        # their own.
        if self.environment.in_flatpak:
            _log.info("Running in Flatpak - using fallback dialog with portal permissions")
        elif self.environment.in_snap:
            _log.info("Running in Snap - using fallback dialog with snap permissions")
        raise DialogUnavailableError("portal file chooser request not supported")

    def _chooser_chain(self) -> List[Tuple[str, Chooser]]:
        chain: List[Tuple[str, Chooser]] = []
        env = self.environment
        if env.is_sandboxed and env.portal_available:
            chain.append(("portal", self._pick_via_portal))
        chain.extend((tool, partial(pick_folder_linux_tool, tool)) for tool in LINUX_DIALOG_TOOLS)
        chain.append(("tk", pick_folder_tk))
        return chain


class WindowsBackend(BaseBackend):
    """Windows 7 and later."""

    name = "windows"

    def platform_version(self) -> str:
        version = self.environment.windows_version
        if version is None:
            return "Windows"

        major, minor = version
        if major >= 10:
            return "Windows 10+"
        if (major, minor) >= (6, 2):
            return "Windows 8"
        if (major, minor) >= (6, 1):
            return "Windows 7"
        return f"Windows {major}.{minor}"

    def _chooser_chain(self) -> List[Tuple[str, Chooser]]:
        return [("tk", pick_folder_tk), ("win32", pick_folder_win32)]


class MacOSBackend(BaseBackend):
    """macOS, outside the App Sandbox."""

    name = "macos"

    def platform_version(self) -> str:
        return f"macOS {self.environment.mac_release}".strip()

    def _chooser_chain(self) -> List[Tuple[str, Chooser]]:
        return [("osascript", pick_folder_osascript), ("tk", pick_folder_tk)]


BACKENDS = {
    "linux": LinuxBackend,
    "windows": WindowsBackend,
    "macos": MacOSBackend,
}


def create_backend(
    environment: Optional[EnvironmentDescriptor] = None,
    platform_name: str = "auto",
    **options,
) -> BaseBackend:
    """
    Create the back end for a platform.

    Args:
        environment: Descriptor of the host system (read from the OS if None)
        platform_name: "auto" to follow the environment, or a back end name
        **options: dialog_backend, dialog_title, probe_prefix

    Returns:
        Back end instance
    """
    environment = environment or EnvironmentDescriptor.from_os()
    name = environment.system if platform_name in (None, "", "auto") else platform_name

    backend_class = BACKENDS.get(name)
    if backend_class is None:
        _log.warning(f"No dedicated back end for platform '{name}', using generic")
        backend_class = BaseBackend

    backend = backend_class(environment, **options)
    _log.debug(f"Using {backend!r} for platform '{name}'")
    return backend


__all__ = [
    "PlatformBackend",
    "BaseBackend",
    "LinuxBackend",
    "WindowsBackend",
    "MacOSBackend",
    "BACKENDS",
    "create_backend",
]
