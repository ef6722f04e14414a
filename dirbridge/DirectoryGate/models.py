"""
DirectoryGate Pydantic models.

Defines the operation names, error codes, response variants and
directory entry metadata exchanged with the host.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """Method names accepted by the dispatcher."""

    GET_PLATFORM_VERSION = "getPlatformVersion"
    SELECT_DIRECTORY = "selectDirectory"
    HAS_PERMISSION = "hasPermission"
    REQUEST_PERMISSION = "requestPermission"
    WRITE_FILE = "writeFile"
    LIST_DIRECTORY = "listDirectory"
    READ_FILE = "readFile"
    GET_DIRECTORY_DETAILS = "getDirectoryDetails"

    @classmethod
    def parse(cls, name: Any) -> Optional["Operation"]:
        """Return the operation for a method name, or None if unknown."""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class ErrorCode(str, Enum):
    """Machine-readable failure codes."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"  # Malformed call input
    INVALID_DIRECTORY = "INVALID_DIRECTORY"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_FILENAME = "INVALID_FILENAME"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    DIR_READ_ERROR = "DIR_READ_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"  # Unexpected exception in a handler


class MethodSuccess(BaseModel):
    """Successful call; value may be None (e.g. cancelled dialog, missing file)."""

    type: Literal["success"] = "success"
    value: Any = None

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for the host channel."""
        value = self.value
        if isinstance(value, list):
            value = [v.to_dict() if isinstance(v, DirectoryEntryDetail) else v for v in value]
        return {"type": self.type, "value": value}


class MethodError(BaseModel):
    """Failed call with a code and the native error text."""

    type: Literal["error"] = "error"
    code: ErrorCode
    message: str = ""
    details: None = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for the host channel."""
        return {
            "type": self.type,
            "code": self.code.value,
            "message": self.message,
            "details": None,
        }


class MethodNotImplemented(BaseModel):
    """The method name is not part of the contract."""

    type: Literal["not_implemented"] = "not_implemented"
    method: str = ""

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for the host channel."""
        return {"type": self.type, "method": self.method}


MethodResponse = Union[MethodSuccess, MethodError, MethodNotImplemented]


def success(value: Any = None) -> MethodSuccess:
    """Create a successful response."""
    return MethodSuccess(value=value)


def failure(code: ErrorCode, message: str) -> MethodError:
    """Create a failed response."""
    return MethodError(code=code, message=message)


class DirectoryEntryDetail(BaseModel):
    """Metadata for one directory entry, identical on every platform."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str = Field(description="Absolute path of the entry")
    is_directory: bool = Field(alias="isDirectory")
    size: int = Field(default=0, ge=0, description="Bytes; 0 for directories")
    last_modified: int = Field(
        default=0,
        ge=0,
        alias="lastModified",
        description="Milliseconds since the Unix epoch",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict with the wire (camelCase) keys."""
        return self.model_dump(by_alias=True)


class ArgSchema(BaseModel):
    """Schema for one argument of an operation."""

    type: Literal["string", "boolean"] = "string"
    description: str = ""
    required: bool = True
    default: Optional[Any] = None


__all__ = [
    "Operation",
    "ErrorCode",
    "MethodSuccess",
    "MethodError",
    "MethodNotImplemented",
    "MethodResponse",
    "success",
    "failure",
    "DirectoryEntryDetail",
    "ArgSchema",
]
