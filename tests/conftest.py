"""
Pytest configuration and shared fixtures for VulkanKit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.archives import runtime_zip, linux_sdk_tar
from tests.mocks.process import FakeRunner

from vulkankit.core.platform import PlatformInfo, clear_platform_cache


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
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Start every test with fresh platform detection."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = temp_dir / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Command runner that records commands instead of running them."""
    return FakeRunner()


# Platforms

@pytest.fixture
def windows_platform() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="x64", platform="windows")


@pytest.fixture
def warm_platform() -> PlatformInfo:
    return PlatformInfo(os="windows", arch="arm64", platform="warm")


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64", platform="linux")


@pytest.fixture
def linux_arm_platform() -> PlatformInfo:
    return PlatformInfo(
        os="linux", arch="arm64", platform="linux-arm", distribution_version="22.04"
    )


@pytest.fixture
def mac_platform() -> PlatformInfo:
    return PlatformInfo(os="macos", arch="arm64", platform="mac")
