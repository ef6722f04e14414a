"""
Tests for the native folder choosers.

Subprocess-based choosers are exercised with a mocked subprocess.run;
nothing here opens a real window.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest

from dirbridge.DirectoryGate import dialogs
from dirbridge.DirectoryGate.dialogs import (
    DialogUnavailableError,
    pick_folder_linux_tool,
    pick_folder_osascript,
)


def completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestLinuxToolChooser:
    """Tests for zenity/kdialog/yad choosers."""

    def test_not_installed(self):
        """A missing tool is unavailable, not a cancel."""
        with patch.object(dialogs.shutil, "which", return_value=None):
            with pytest.raises(DialogUnavailableError):
                pick_folder_linux_tool("zenity", "Select Directory")

    def test_selection(self, temp_dir):
        """The printed path is returned."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/zenity"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(0, f"{temp_dir}\n")) as run:
            assert pick_folder_linux_tool("zenity", "Pick") == str(temp_dir)

        command = run.call_args[0][0]
        assert command[:3] == ["zenity", "--file-selection", "--directory"]
        assert "Pick" in command

    def test_kdialog_command(self, temp_dir):
        """kdialog is asked for an existing directory."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/kdialog"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(0, f"{temp_dir}\n")) as run:
            pick_folder_linux_tool("kdialog", "Pick")

        assert run.call_args[0][0][1] == "--getexistingdirectory"

    def test_cancel(self):
        """Exit status 1 is a cancel."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/yad"), \
                patch.object(dialogs.subprocess, "run", return_value=completed(1)):
            assert pick_folder_linux_tool("yad", "Pick") is None

    def test_yad_window_closed(self):
        """yad exits 252 when closed or escaped, which is a cancel."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/yad"), \
                patch.object(dialogs.subprocess, "run", return_value=completed(252)):
            assert pick_folder_linux_tool("yad", "Pick") is None

    def test_252_from_zenity_is_unavailable(self):
        """Only yad uses 252 for a closed window."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/zenity"), \
                patch.object(dialogs.subprocess, "run", return_value=completed(252)):
            with pytest.raises(DialogUnavailableError):
                pick_folder_linux_tool("zenity", "Pick")

    def test_nonexistent_selection(self, temp_dir):
        """A printed path that is not a directory is treated as no selection."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/zenity"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(0, f"{temp_dir / 'gone'}\n")):
            assert pick_folder_linux_tool("zenity", "Pick") is None

    def test_failure_is_unavailable(self):
        """Other exit statuses (e.g. no display) mean the tool cannot be used."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/zenity"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(255, stderr="cannot open display")):
            with pytest.raises(DialogUnavailableError, match="cannot open display"):
                pick_folder_linux_tool("zenity", "Pick")

    def test_start_failure_is_unavailable(self):
        """A tool that cannot be started is unavailable."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/zenity"), \
                patch.object(dialogs.subprocess, "run", side_effect=OSError("exec format error")):
            with pytest.raises(DialogUnavailableError):
                pick_folder_linux_tool("zenity", "Pick")

    def test_unknown_tool(self):
        """Only the known tools are run."""
        with pytest.raises(DialogUnavailableError):
            pick_folder_linux_tool("rm", "Pick")


class TestOsascriptChooser:
    """Tests for the macOS chooser."""

    def test_selection_strips_trailing_slash(self, temp_dir):
        """POSIX paths of folders end with '/', which is dropped."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/osascript"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(0, f"{temp_dir}/\n")):
            assert pick_folder_osascript("Pick") == str(temp_dir)

    def test_cancel(self):
        """Error -128 is a user cancel."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/osascript"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(1, stderr="execution error: User canceled. (-128)")):
            assert pick_folder_osascript("Pick") is None

    def test_title_is_escaped(self, temp_dir):
        """Quotes in the title cannot break out of the AppleScript string."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/osascript"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(0, f"{temp_dir}/\n")) as run:
            pick_folder_osascript('Say "hi"')

        script = run.call_args[0][0][2]
        assert 'prompt "Say \\"hi\\""' in script

    def test_not_available(self):
        """Without osascript the chooser is unavailable."""
        with patch.object(dialogs.shutil, "which", return_value=None):
            with pytest.raises(DialogUnavailableError):
                pick_folder_osascript("Pick")

    def test_other_failure(self):
        """Other osascript errors mean the chooser is unavailable."""
        with patch.object(dialogs.shutil, "which", return_value="/usr/bin/osascript"), \
                patch.object(dialogs.subprocess, "run",
                             return_value=completed(1, stderr="no user interaction allowed")):
            with pytest.raises(DialogUnavailableError):
                pick_folder_osascript("Pick")


class TestTkChooser:
    """Tests for the tkinter chooser without opening a window."""

    def test_no_display(self):
        """A Tk that cannot open a window is unavailable."""
        tk = pytest.importorskip("tkinter")
        with patch.object(tk, "Tk", side_effect=tk.TclError("no display name")):
            with pytest.raises(DialogUnavailableError):
                dialogs.pick_folder_tk("Pick")

    def test_selection(self, temp_dir):
        """The chosen directory is returned as an absolute path."""
        tk = pytest.importorskip("tkinter")
        filedialog = pytest.importorskip("tkinter.filedialog")
        root = MagicMock()
        with patch.object(tk, "Tk", return_value=root), \
                patch.object(filedialog, "askdirectory", return_value=str(temp_dir)):
            assert dialogs.pick_folder_tk("Pick") == str(temp_dir)

        root.withdraw.assert_called_once()
        root.destroy.assert_called_once()

    def test_cancel(self):
        """An empty result is a cancel."""
        tk = pytest.importorskip("tkinter")
        filedialog = pytest.importorskip("tkinter.filedialog")
        with patch.object(tk, "Tk", return_value=MagicMock()), \
                patch.object(filedialog, "askdirectory", return_value=""):
            assert dialogs.pick_folder_tk("Pick") is None


@pytest.mark.skipif(sys.platform == "win32", reason="real Windows shell API present")
def test_win32_unavailable_off_windows():
    """SHBrowseForFolderW is unavailable where there is no windll."""

    with pytest.raises(DialogUnavailableError):
        dialogs.pick_folder_win32("Pick")
