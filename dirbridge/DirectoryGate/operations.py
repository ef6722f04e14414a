"""
DirectoryGate file operations.

Provides the write probe, file read/write and directory enumeration shared
by every platform back end. Each operation returns a response object; OS
errors never escape.
"""

import os
import stat
import tempfile
from typing import List, Optional

from dirbridge.shared.gate import GateErrorHandler, GateLogger

from .models import (
    DirectoryEntryDetail,
    ErrorCode,
    MethodResponse,
    failure,
    success,
)
from .security import validate_file_name

_log = GateLogger.get("DirectoryGate")

DEFAULT_PROBE_PREFIX = ".dirbridge_probe_"


def _is_directory(path: str) -> bool:
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


# ==================== Permission Probe ====================


def probe_write_access(directory_path: str, prefix: str = DEFAULT_PROBE_PREFIX) -> bool:
    """
    Check whether files can actually be created in a directory.

    Creates and removes a uniquely named file rather than trusting mode
    bits, which ACLs, read-only mounts and sandboxes can contradict.

    Args:
        directory_path: Directory to probe
        prefix: Name prefix for the probe file

    Returns:
        True if the directory exists and a file could be created in it
    """
    if not _is_directory(directory_path):
        return False

    try:
        fd, probe_path = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=directory_path)
    except (OSError, ValueError) as e:
        _log.debug(f"Write probe failed in {directory_path}: {e}")
        return False

    os.close(fd)
    try:
        os.unlink(probe_path)
    except OSError as e:
        _log.warning(f"Could not remove write probe {probe_path}: {e}")

    return True


# ==================== File I/O ====================


def _file_mode(file_path: str) -> int:
    """Mode for a written file: the existing file's, else 0666 less the umask."""
    if os.path.exists(file_path):
        return stat.S_IMODE(os.stat(file_path).st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_file(
    directory_path: str,
    file_name: str,
    content: str,
    probe_prefix: str = DEFAULT_PROBE_PREFIX,
) -> MethodResponse:
    """
    Write text content to a direct child of a directory.

    The body is written as UTF-8 bytes with no newline translation, through
    a temporary file in the same directory that replaces the target.

    Args:
        directory_path: Existing, writable directory
        file_name: Name of the file to create or overwrite
        content: Full file body
        probe_prefix: Name prefix for the permission probe

    Returns:
        Success(True) or a Failure with INVALID_DIRECTORY, PERMISSION_DENIED,
        INVALID_FILENAME or FILE_WRITE_ERROR
    """
    if not _is_directory(directory_path):
        return failure(
            ErrorCode.INVALID_DIRECTORY,
            "Directory does not exist or is not accessible",
        )

    if not probe_write_access(directory_path, probe_prefix):
        return failure(ErrorCode.PERMISSION_DENIED, "No write permission for directory")

    name_ok, name_error = validate_file_name(file_name)
    if not name_ok:
        return failure(ErrorCode.INVALID_FILENAME, name_error)

    file_path = os.path.join(directory_path, file_name)

    try:
        data = content.encode("utf-8")
    except UnicodeEncodeError as e:
        return failure(ErrorCode.FILE_WRITE_ERROR, f"Content is not valid UTF-8: {e}")

    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{file_name}.", suffix=".tmp", dir=directory_path)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600
        os.chmod(tmp_path, _file_mode(file_path))
        os.replace(tmp_path, file_path)
        tmp_path = None
    except OSError as e:
        _log.warning(f"Failed to write {file_path}: {e}")
        return failure(ErrorCode.FILE_WRITE_ERROR, GateErrorHandler.describe(e))
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                _log.debug(f"Could not remove temporary file {tmp_path}")

    _log.debug(f"Wrote {len(data)} bytes to {file_path}")
    return success(True)


def read_file(file_path: str) -> MethodResponse:
    """
    Read a whole file as UTF-8 text.

    Args:
        file_path: Path of the file

    Returns:
        Success(content), Success(None) if nothing exists at the path,
        or Failure(FILE_READ_ERROR)
    """
    if not os.path.exists(file_path):
        return success(None)

    try:
        with open(file_path, "rb") as f:
            data = f.read()
    except OSError as e:
        _log.warning(f"Failed to read {file_path}: {e}")
        return failure(ErrorCode.FILE_READ_ERROR, GateErrorHandler.describe(e))

    try:
        return success(data.decode("utf-8"))
    except UnicodeDecodeError as e:
        return failure(ErrorCode.FILE_READ_ERROR, f"Cannot decode file as UTF-8: {e}")


# ==================== Directory Enumeration ====================


def _walk_names(directory_path: str, prefix: str, names: List[str], recursive: bool) -> None:
    with os.scandir(directory_path) as entries:
        for entry in entries:
            relative = f"{prefix}/{entry.name}" if prefix else entry.name
            names.append(relative)
            if recursive and entry.is_dir(follow_symlinks=False):
                _walk_names(entry.path, relative, names, recursive)


def list_directory(directory_path: str, recursive: bool = False) -> MethodResponse:
    """
    List the names in a directory.

    Args:
        directory_path: Directory to list
        recursive: Also list descendants, as '/'-joined relative paths

    Returns:
        Success(list of names), Success(None) if the path is not an existing
        directory, or Failure(DIR_READ_ERROR)
    """
    if not _is_directory(directory_path):
        return success(None)

    names: List[str] = []
    try:
        _walk_names(directory_path, "", names, recursive)
    except OSError as e:
        _log.warning(f"Failed to list {directory_path}: {e}")
        return failure(ErrorCode.DIR_READ_ERROR, GateErrorHandler.describe(e))

    return success(names)


def _mtime_millis(st: os.stat_result) -> int:
    return max(0, st.st_mtime_ns // 1_000_000)


def build_entry_detail(entry_path: str, name: str) -> DirectoryEntryDetail:
    """
    Stat one entry and build its metadata record.

    Raises:
        OSError: If the entry cannot be stat'ed
    """
    st = os.stat(entry_path)
    is_dir = stat.S_ISDIR(st.st_mode)
    return DirectoryEntryDetail(
        name=name,
        path=entry_path,
        is_directory=is_dir,
        size=0 if is_dir else max(0, st.st_size),
        last_modified=_mtime_millis(st),
    )


def _walk_details(
    directory_path: str,
    details: List[DirectoryEntryDetail],
    recursive: bool,
    strict: bool,
) -> Optional[str]:
    """Collect entry details; returns an error text only in strict mode."""
    with os.scandir(directory_path) as entries:
        for entry in entries:
            try:
                detail = build_entry_detail(entry.path, entry.name)
            except OSError as e:
                if strict:
                    return f"Cannot stat {entry.path}: {GateErrorHandler.describe(e)}"
                _log.debug(f"Skipping {entry.path}: {e}")
                continue

            details.append(detail)

            if recursive and entry.is_dir(follow_symlinks=False):
                error = _walk_details(entry.path, details, recursive, strict)
                if error:
                    return error
    return None


def get_directory_details(
    directory_path: str,
    recursive: bool = False,
    strict: bool = False,
) -> MethodResponse:
    """
    Get metadata for the entries of a directory.

    Entries that cannot be stat'ed are skipped, so the list may be partial.
    In strict mode the first such entry fails the whole call instead.

    Args:
        directory_path: Directory to inspect
        recursive: Also include descendants
        strict: All-or-nothing mode

    Returns:
        Success(list of DirectoryEntryDetail), Success(None) if the path is
        not an existing directory, or Failure(DIR_READ_ERROR)
    """
    if not _is_directory(directory_path):
        return success(None)

    details: List[DirectoryEntryDetail] = []
    try:
        error = _walk_details(os.path.abspath(directory_path), details, recursive, strict)
    except OSError as e:
        _log.warning(f"Failed to read {directory_path}: {e}")
        return failure(ErrorCode.DIR_READ_ERROR, GateErrorHandler.describe(e))

    if error:
        return failure(ErrorCode.DIR_READ_ERROR, error)

    return success(details)
