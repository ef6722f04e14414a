"""
DirectoryGate argument validation.

Checks the untyped argument bundle of a call against the schema of its
operation before any filesystem access happens.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from .models import ArgSchema, Operation


_DIRECTORY_PATH = ArgSchema(type="string", description="Absolute path of a directory")
_RECURSIVE = ArgSchema(
    type="boolean",
    description="Include descendants, not just immediate children",
    required=False,
    default=False,
)

OPERATION_SCHEMAS: Dict[Operation, Dict[str, ArgSchema]] = {
    Operation.GET_PLATFORM_VERSION: {},
    Operation.SELECT_DIRECTORY: {},
    Operation.HAS_PERMISSION: {"directoryPath": _DIRECTORY_PATH},
    Operation.REQUEST_PERMISSION: {"directoryPath": _DIRECTORY_PATH},
    Operation.WRITE_FILE: {
        "directoryPath": _DIRECTORY_PATH,
        "fileName": ArgSchema(type="string", description="Name of a direct child of the directory"),
        "content": ArgSchema(type="string", description="Full text body of the file"),
    },
    Operation.LIST_DIRECTORY: {
        "directoryPath": _DIRECTORY_PATH,
        "recursive": _RECURSIVE,
    },
    Operation.READ_FILE: {
        "filePath": ArgSchema(type="string", description="Path of the file to read"),
    },
    Operation.GET_DIRECTORY_DETAILS: {
        "directoryPath": _DIRECTORY_PATH,
        "recursive": _RECURSIVE,
        # No default here: the gate falls back to DIRBRIDGE_STRICT_DETAILS
        "strict": ArgSchema(
            type="boolean",
            description="Fail the whole call if any entry cannot be stat'ed",
            required=False,
        ),
    },
}


def _matches(value: Any, expected_type: str) -> bool:
    if expected_type == "string":
        return isinstance(value, str)
    if expected_type == "boolean":
        return isinstance(value, bool)
    return False


def validate_args(
    operation: Operation,
    args: Any,
) -> Tuple[bool, Optional[str], Dict[str, Any]]:
    """
    Validate an argument bundle against an operation's schema.

    Args:
        operation: Operation being called
        args: Argument bundle as received from the host

    Returns:
        Tuple of (is_valid, error_message, normalized_args). The normalized
        dict holds only schema keys, with defaults applied to optional ones.
    """
    schema = OPERATION_SCHEMAS[operation]

    # Operations without arguments accept any bundle
    if not schema:
        return True, None, {}

    if not isinstance(args, Mapping):
        return False, "Arguments must be a map", {}

    normalized: Dict[str, Any] = {}

    for arg_name, arg_schema in schema.items():
        if arg_name not in args or args[arg_name] is None:
            if arg_schema.required:
                return False, f"Missing required argument: {arg_name}", {}
            normalized[arg_name] = arg_schema.default
            continue

        value = args[arg_name]
        if not _matches(value, arg_schema.type):
            return (
                False,
                f"{arg_name} must be a {arg_schema.type}, got {type(value).__name__}",
                {},
            )
        normalized[arg_name] = value

    return True, None, normalized


__all__ = [
    "OPERATION_SCHEMAS",
    "validate_args",
]
