"""
Pytest configuration and fixtures for dirbridge tests.
"""

import os
import sys
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from dirbridge import Config
from dirbridge import DirectoryGate as directory_gate_module
from dirbridge.Config.schema import CONFIG_SCHEMA
from dirbridge.DirectoryGate.environment import EnvironmentDescriptor


# Running as root bypasses mode bits, so read-only directories stay writable
IS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0

requires_mode_bits = pytest.mark.skipif(
    IS_ROOT or sys.platform == "win32",
    reason="directory mode bits are not enforced for this user/platform",
)


@pytest.fixture(autouse=True)
def isolated_gate(monkeypatch, tmp_path_factory):
    """Reset module state and keep host configuration out of every test."""
    for field in CONFIG_SCHEMA:
        monkeypatch.delenv(field.env_var, raising=False)

    # Keep find_dotenv() from picking up a developer's .env
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))

    monkeypatch.setattr(Config, "_manager", None)
    monkeypatch.setattr(directory_gate_module, "_backend", None)
    yield


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_folder(temp_dir: Path) -> Path:
    """Create a sample folder with test files."""
    folder = temp_dir / "sample_folder"
    folder.mkdir(parents=True, exist_ok=True)

    # Create some test files
    (folder / "readme.txt").write_text("Hello World")
    (folder / "data.json").write_text('{"key": "value"}')

    subfolder = folder / "subfolder"
    subfolder.mkdir()
    (subfolder / "nested.txt").write_text("Nested content")

    return folder


@pytest.fixture
def a_file(temp_dir: Path) -> Path:
    """A regular file, for checks that must reject non-directories."""
    path = temp_dir / "plain.txt"
    path.write_text("not a directory")
    return path


@pytest.fixture
def linux_env() -> EnvironmentDescriptor:
    """Plain Linux desktop, not sandboxed."""
    return EnvironmentDescriptor(system="linux", kernel_version="#1 SMP PREEMPT_DYNAMIC")


@pytest.fixture
def flatpak_env() -> EnvironmentDescriptor:
    """Linux inside a Flatpak sandbox with a reachable portal."""
    return EnvironmentDescriptor(
        system="linux",
        in_flatpak=True,
        portal_available=True,
        kernel_version="#1 SMP",
    )


@pytest.fixture
def windows_env() -> EnvironmentDescriptor:
    """Windows 10."""
    return EnvironmentDescriptor(system="windows", windows_version=(10, 0))


@pytest.fixture
def macos_env() -> EnvironmentDescriptor:
    """macOS Sonoma."""
    return EnvironmentDescriptor(system="macos", mac_release="14.5")
