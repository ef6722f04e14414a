"""
Native folder choosers.

Each chooser blocks until the user dismisses it and returns the chosen
path, or None when the user cancels. A chooser that cannot be shown at all
(tool not installed, no display, toolkit missing) raises
DialogUnavailableError so the caller can try the next one.

Choosers:
  - zenity / kdialog / yad  (Linux desktops, run as subprocesses)
  - tkinter askdirectory    (any platform with Tk; on Windows it shows the
                             shell's IFileOpenDialog in pick-folders mode)
  - SHBrowseForFolderW      (Windows, via ctypes)
  - osascript choose folder (macOS)
"""

import os
import shutil
import subprocess
from typing import List, Optional


LINUX_DIALOG_TOOLS = ("zenity", "kdialog", "yad")

# yad exits with 252 when the window is closed or Escape is pressed
YAD_CLOSED = 252


class DialogUnavailableError(Exception):
    """Raised when a chooser cannot be shown."""
    pass


def _existing_dir(path: str) -> Optional[str]:
    path = path.strip()
    if path and os.path.isdir(path):
        return path
    return None


# =========================================================================
# Linux: zenity / kdialog / yad
# =========================================================================


def _linux_command(tool: str, title: str) -> List[str]:
    if tool == "zenity":
        return ["zenity", "--file-selection", "--directory", "--title", title]
    if tool == "kdialog":
        return ["kdialog", "--getexistingdirectory", os.path.expanduser("~"), "--title", title]
    return ["yad", "--file", "--directory", "--title", title]


def pick_folder_linux_tool(tool: str, title: str) -> Optional[str]:
    """Pick a folder with zenity, kdialog or yad."""
    if tool not in LINUX_DIALOG_TOOLS or not shutil.which(tool):
        raise DialogUnavailableError(f"{tool} is not installed")

    try:
        result = subprocess.run(_linux_command(tool, title), capture_output=True, text=True)
    except OSError as e:
        raise DialogUnavailableError(f"{tool} failed to start: {e}") from e

    if result.returncode == 0:
        return _existing_dir(result.stdout)
    if result.returncode == 1 or (tool == "yad" and result.returncode == YAD_CLOSED):
        # Cancel button or window closed
        return None
    raise DialogUnavailableError(
        f"{tool} exited with status {result.returncode}: {result.stderr.strip()}"
    )


# =========================================================================
# tkinter
# =========================================================================


def pick_folder_tk(title: str) -> Optional[str]:
    """
    Pick a folder with tkinter.

    Must be called on the thread that may own a Tk interpreter (normally
    the main thread).
    """
    try:
        import tkinter as tk
        from tkinter import filedialog
    except ImportError as e:
        raise DialogUnavailableError(f"tkinter is not available: {e}") from e

    try:
        root = tk.Tk()
    except tk.TclError as e:
        raise DialogUnavailableError(f"Tk cannot open a window: {e}") from e

    try:
        root.withdraw()
        root.attributes("-topmost", True)
        chosen = filedialog.askdirectory(parent=root, title=title, mustexist=True)
    except tk.TclError as e:
        raise DialogUnavailableError(f"Tk folder chooser failed: {e}") from e
    finally:
        root.destroy()

    return os.path.abspath(chosen) if chosen else None


# =========================================================================
# Windows: SHBrowseForFolderW
# =========================================================================


def pick_folder_win32(title: str) -> Optional[str]:
    """Pick a folder with the shell's SHBrowseForFolderW dialog."""
    try:
        import ctypes
        import ctypes.wintypes
        shell32 = ctypes.windll.shell32
        ole32 = ctypes.windll.ole32
    except (ImportError, AttributeError, OSError, ValueError) as e:
        raise DialogUnavailableError(f"Win32 shell API is not available: {e}") from e

    BIF_RETURNONLYFSDIRS = 0x00000001
    BIF_EDITBOX = 0x00000010
    BIF_NEWDIALOGSTYLE = 0x00000040
    MAX_PATH = 260

    class BROWSEINFOW(ctypes.Structure):
        _fields_ = [
            ("hwndOwner", ctypes.wintypes.HWND),
            ("pidlRoot", ctypes.c_void_p),
            ("pszDisplayName", ctypes.wintypes.LPWSTR),
            ("lpszTitle", ctypes.wintypes.LPCWSTR),
            ("ulFlags", ctypes.c_uint),
            ("lpfn", ctypes.c_void_p),
            ("lParam", ctypes.wintypes.LPARAM),
            ("iImage", ctypes.c_int),
        ]

    shell32.SHBrowseForFolderW.restype = ctypes.c_void_p
    shell32.SHGetPathFromIDListW.argtypes = [ctypes.c_void_p, ctypes.wintypes.LPWSTR]

    # The new dialog style requires an apartment-threaded COM
    ole32.CoInitializeEx(None, 0x2)
    try:
        display_buf = ctypes.create_unicode_buffer(MAX_PATH)

        info = BROWSEINFOW()
        info.hwndOwner = None
        info.pszDisplayName = ctypes.cast(display_buf, ctypes.wintypes.LPWSTR)
        info.lpszTitle = title
        info.ulFlags = BIF_RETURNONLYFSDIRS | BIF_NEWDIALOGSTYLE | BIF_EDITBOX

        pidl = shell32.SHBrowseForFolderW(ctypes.byref(info))
        if not pidl:
            return None

        path_buf = ctypes.create_unicode_buffer(MAX_PATH)
        try:
            found = shell32.SHGetPathFromIDListW(pidl, path_buf)
        finally:
            ole32.CoTaskMemFree(ctypes.c_void_p(pidl))
    finally:
        ole32.CoUninitialize()

    if found and path_buf.value:
        return path_buf.value
    return None


# =========================================================================
# macOS: osascript
# =========================================================================


def _osa_escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def pick_folder_osascript(title: str) -> Optional[str]:
    """Pick a folder with AppleScript's choose folder."""
    if not shutil.which("osascript"):
        raise DialogUnavailableError("osascript is not available")

    script = (
        f'set theFolder to choose folder with prompt "{_osa_escape(title)}"\n'
        "return POSIX path of theFolder\n"
    )
    try:
        result = subprocess.run(["osascript", "-e", script], capture_output=True, text=True)
    except OSError as e:
        raise DialogUnavailableError(f"osascript failed to start: {e}") from e

    if result.returncode == 0:
        path = _existing_dir(result.stdout)
        return (path.rstrip("/") or "/") if path else None
    if "-128" in result.stderr:
        # User canceled
        return None
    raise DialogUnavailableError(f"osascript failed: {result.stderr.strip()}")


__all__ = [
    "DialogUnavailableError",
    "LINUX_DIALOG_TOOLS",
    "pick_folder_linux_tool",
    "pick_folder_tk",
    "pick_folder_win32",
    "pick_folder_osascript",
]
