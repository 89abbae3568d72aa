"""
Pytest configuration and shared fixtures for dnscontrolkit tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from dnscontrolkit.ci.runner import Runner
from dnscontrolkit.core.platform import PlatformInfo

# A stand-in for the dnscontrol binary: answers 'version' and exits 0
FAKE_BINARY = b"#!/bin/sh\necho 'dnscontrol 4.2.0'\nexit 0\n"

# Same, but fails like a wrong-architecture binary would
BROKEN_BINARY = b"#!/bin/sh\necho 'cannot execute binary file' >&2\nexit 126\n"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Archive builders
# ============================================================================


def build_tar_gz(members: Dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a .tar.gz archive in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def build_zip(members: Dict[str, bytes]) -> bytes:
    """Build a .zip archive in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def tar_gz_builder() -> Callable[..., bytes]:
    return build_tar_gz


@pytest.fixture
def zip_builder() -> Callable[..., bytes]:
    return build_zip


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def windows_platform() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="x64")


@pytest.fixture
def runner_env(tmp_path) -> Dict[str, str]:
    """Environment with an empty PATH and GitHub Actions command files."""
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    github = tmp_path / "github"
    github.mkdir()
    (github / "path").touch()
    (github / "output").touch()
    return {
        "PATH": str(empty_bin),
        "GITHUB_PATH": str(github / "path"),
        "GITHUB_OUTPUT": str(github / "output"),
    }


@pytest.fixture
def runner(runner_env) -> Runner:
    return Runner(environ=runner_env, stream=io.StringIO())


@pytest.fixture
def install_root(tmp_path) -> Path:
    return tmp_path / "install"


@pytest.fixture
def cache_root(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def fake_binary() -> bytes:
    return FAKE_BINARY


@pytest.fixture
def broken_binary() -> bytes:
    return BROKEN_BINARY
