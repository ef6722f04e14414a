"""
DirectoryGate - Native directory and file operations for a host application.

Provides:
- A fixed method contract dispatched by name with untyped arguments
- Per-operation argument validation before any filesystem access
- Native folder chooser (portal-aware on Linux)
- Write-capability probing, file read/write, directory listing and metadata
- One response shape on every platform

Usage:
    from dirbridge import DirectoryGate

    # Dispatch a call received from the host
    response = DirectoryGate.dispatch("listDirectory", {"directoryPath": "/tmp"})
    payload = response.to_dict()

    # Or call an operation directly
    response = DirectoryGate.write_file("/tmp", "notes.txt", "Hello world")
"""

from typing import Any, Callable, Dict, List, Optional

from dirbridge import Config
from dirbridge.shared.gate import (
    GateErrorHandler,
    GateLogger,
    build_health_status,
)

from .models import (
    ArgSchema,
    DirectoryEntryDetail,
    ErrorCode,
    MethodError,
    MethodNotImplemented,
    MethodResponse,
    MethodSuccess,
    Operation,
    failure,
    success,
)
from .validation import OPERATION_SCHEMAS, validate_args
from .environment import EnvironmentDescriptor
from .backends import (
    BaseBackend,
    LinuxBackend,
    MacOSBackend,
    PlatformBackend,
    WindowsBackend,
    create_backend,
)
from .dialogs import DialogUnavailableError

# Logger for this gate
_log = GateLogger.get("DirectoryGate")

# Module-level state
_backend: Optional[PlatformBackend] = None


class DirectoryGate:
    """
    Main interface for directory operations.

    All methods are class methods so the gate can be used without setup;
    the platform back end is created from configuration on first use.
    """

    # ==================== Back end ====================

    @classmethod
    def get_backend(cls) -> PlatformBackend:
        """Get the platform back end, creating it if needed."""
        global _backend
        if _backend is None:
            _backend = create_backend(
                platform_name=Config.get("DIRBRIDGE_PLATFORM", "auto"),
                dialog_backend=Config.get("DIRBRIDGE_DIALOG_BACKEND", "auto"),
                dialog_title=Config.get("DIRBRIDGE_DIALOG_TITLE"),
                probe_prefix=Config.get("DIRBRIDGE_PROBE_PREFIX"),
            )
            _log.info(f"Initialized with {_backend.name} back end")
        return _backend

    @classmethod
    def set_backend(cls, backend: Optional[PlatformBackend]) -> None:
        """Replace the platform back end (None recreates it on next use)."""
        global _backend
        _backend = backend

    # ==================== Dispatch ====================

    @classmethod
    def dispatch(cls, method: Any, args: Any = None) -> MethodResponse:
        """
        Handle one call from the host.

        Args:
            method: Operation name, e.g. "writeFile"
            args: Argument bundle (a mapping for operations that take
                arguments)

        Returns:
            MethodSuccess, MethodError, or MethodNotImplemented for an
            unknown method name. Never raises.
        """
        operation = Operation.parse(method)
        if operation is None:
            _log.debug(f"Method not implemented: {method!r}")
            return MethodNotImplemented(method=str(method))

        is_valid, error, params = validate_args(operation, args)
        if not is_valid:
            _log.debug(f"{operation.value}: invalid arguments: {error}")
            return failure(ErrorCode.INVALID_ARGUMENT, error)

        handler = _HANDLERS[operation]
        try:
            return handler(params)
        except Exception as e:
            GateErrorHandler.handle("DirectoryGate", operation.value, e)
            return failure(ErrorCode.INTERNAL_ERROR, GateErrorHandler.describe(e))

    # ==================== Operations ====================

    @classmethod
    def get_platform_version(cls) -> MethodResponse:
        """Get a platform description such as "Linux <kernel version>"."""
        return success(cls.get_backend().platform_version())

    @classmethod
    def select_directory(cls) -> MethodResponse:
        """
        Show the native folder chooser.

        Blocks until the user dismisses it. The value is the chosen
        absolute path, or None if the user cancelled.
        """
        return success(cls.get_backend().select_directory())

    @classmethod
    def has_permission(cls, directory_path: str) -> MethodResponse:
        """Check that directory_path is an existing directory we can write to."""
        return success(cls.get_backend().has_permission(directory_path))

    @classmethod
    def request_permission(cls, directory_path: str) -> MethodResponse:
        """
        Request write access to directory_path.

        Same result as has_permission() on back ends without an interactive
        grant flow.
        """
        return success(cls.get_backend().request_permission(directory_path))

    @classmethod
    def write_file(cls, directory_path: str, file_name: str, content: str) -> MethodResponse:
        """Write content to directory_path/file_name, replacing any existing file."""
        return cls.get_backend().write_file(directory_path, file_name, content)

    @classmethod
    def list_directory(cls, directory_path: str, recursive: bool = False) -> MethodResponse:
        """List entry names; None if directory_path is not a directory."""
        return cls.get_backend().list_directory(directory_path, recursive)

    @classmethod
    def read_file(cls, file_path: str) -> MethodResponse:
        """Read a file as text; None if it does not exist."""
        return cls.get_backend().read_file(file_path)

    @classmethod
    def get_directory_details(
        cls,
        directory_path: str,
        recursive: bool = False,
        strict: Optional[bool] = None,
    ) -> MethodResponse:
        """
        Get DirectoryEntryDetail records for the entries of a directory.

        Args:
            directory_path: Directory to inspect
            recursive: Include descendants
            strict: Fail on any unreadable entry instead of skipping it
                (defaults to DIRBRIDGE_STRICT_DETAILS)
        """
        if strict is None:
            strict = bool(Config.get("DIRBRIDGE_STRICT_DETAILS", False))
        return cls.get_backend().get_directory_details(directory_path, recursive, strict)

    # ==================== Health Checks ====================

    @classmethod
    def is_healthy(cls) -> bool:
        """Check if the gate is operational."""
        return cls.get_health_status()["healthy"]

    @classmethod
    def get_health_status(cls) -> Dict[str, Any]:
        """Get detailed health information."""
        checks: Dict[str, bool] = {}
        details: Dict[str, Any] = {}

        initialized = _backend is not None
        if initialized:
            config_ok, config_errors = Config.validate()
            checks["config_valid"] = config_ok
            details["backend"] = _backend.name
            details["platform_version"] = _backend.platform_version()
            details["choosers"] = _backend.available_choosers()
            if config_errors:
                details["config_errors"] = config_errors

        return build_health_status(
            gate_name="DirectoryGate",
            initialized=initialized,
            dependencies=cls.get_dependencies(),
            checks=checks,
            details=details,
        )

    @classmethod
    def get_dependencies(cls) -> List[str]:
        """List external dependencies."""
        return ["filesystem", "folder chooser"]


_HANDLERS: Dict[Operation, Callable[[Dict[str, Any]], MethodResponse]] = {
    Operation.GET_PLATFORM_VERSION: lambda p: DirectoryGate.get_platform_version(),
    Operation.SELECT_DIRECTORY: lambda p: DirectoryGate.select_directory(),
    Operation.HAS_PERMISSION: lambda p: DirectoryGate.has_permission(p["directoryPath"]),
    Operation.REQUEST_PERMISSION: lambda p: DirectoryGate.request_permission(p["directoryPath"]),
    Operation.WRITE_FILE: lambda p: DirectoryGate.write_file(
        p["directoryPath"], p["fileName"], p["content"]
    ),
    Operation.LIST_DIRECTORY: lambda p: DirectoryGate.list_directory(
        p["directoryPath"], p["recursive"]
    ),
    Operation.READ_FILE: lambda p: DirectoryGate.read_file(p["filePath"]),
    Operation.GET_DIRECTORY_DETAILS: lambda p: DirectoryGate.get_directory_details(
        p["directoryPath"], p["recursive"], p["strict"]
    ),
}


# ==================== Module-level convenience functions ====================


def dispatch(method: Any, args: Any = None) -> MethodResponse:
    """Handle one call from the host."""
    return DirectoryGate.dispatch(method, args)


def get_backend() -> PlatformBackend:
    """Get the platform back end."""
    return DirectoryGate.get_backend()


def set_backend(backend: Optional[PlatformBackend]) -> None:
    """Replace the platform back end."""
    DirectoryGate.set_backend(backend)


def get_health_status() -> Dict[str, Any]:
    """Get detailed health information."""
    return DirectoryGate.get_health_status()


def get_info() -> dict:
    """
    Get documentation for DirectoryGate.

    Returns the method contract: arguments, success values and error codes.
    """
    returns = {
        Operation.GET_PLATFORM_VERSION: "string, e.g. 'Linux <kernel-version>' or 'Windows 10+'",
        Operation.SELECT_DIRECTORY: "absolute path string, or null if cancelled",
        Operation.HAS_PERMISSION: "boolean",
        Operation.REQUEST_PERMISSION: "boolean (same check as hasPermission)",
        Operation.WRITE_FILE: "true",
        Operation.LIST_DIRECTORY: "list of names, or null if not a directory",
        Operation.READ_FILE: "string, or null if the file does not exist",
        Operation.GET_DIRECTORY_DETAILS: (
            "list of {name, path, isDirectory, size, lastModified}, "
            "or null if not a directory"
        ),
    }

    return {
        "gate": "DirectoryGate",
        "version": "1.0",
        "purpose": "Native directory picker and file operations with one contract on every platform.",
        "methods": {
            operation.value: {
                "args": {
                    name: {
                        "type": arg.type,
                        "required": arg.required,
                        "default": arg.default,
                        "description": arg.description,
                    }
                    for name, arg in OPERATION_SCHEMAS[operation].items()
                },
                "returns": returns[operation],
            }
            for operation in Operation
        },
        "errors": [code.value for code in ErrorCode],
        "not_implemented": "Unknown method names get a not_implemented response, not an error",
    }


__all__ = [
    # Class
    "DirectoryGate",
    # Dispatch
    "dispatch",
    "get_backend",
    "set_backend",
    # Health
    "get_health_status",
    # Models
    "Operation",
    "ErrorCode",
    "MethodSuccess",
    "MethodError",
    "MethodNotImplemented",
    "MethodResponse",
    "DirectoryEntryDetail",
    "ArgSchema",
    # Back ends
    "PlatformBackend",
    "BaseBackend",
    "LinuxBackend",
    "WindowsBackend",
    "MacOSBackend",
    "EnvironmentDescriptor",
    "create_backend",
    # Errors
    "DialogUnavailableError",
    # Documentation
    "get_info",
]
