"""
DirectoryGate security module.

Keeps writes confined to direct children of the target directory.
"""

from typing import Optional, Tuple


# Substrings that would let a file name leave its directory
FORBIDDEN_NAME_PARTS = ("..", "/", "\\")


def validate_file_name(file_name: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a file name names a direct child of a directory.

    Rejects parent-directory segments and both path separators on every
    platform, so a name accepted on Linux is also accepted on Windows.

    Args:
        file_name: Name supplied by the caller

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not file_name or file_name == ".":
        return False, "File name must name a file inside the directory"

    if "\x00" in file_name:
        return False, "File name contains invalid characters"

    for part in FORBIDDEN_NAME_PARTS:
        if part in file_name:
            return False, "File name contains invalid characters"

    return True, None
