import os
import pytest
import structlog
from pathlib import Path

FAKE_EXECUTABLE_SIZE = 5000


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog configuration from leaking between tests"""
    try:
        yield
    finally:
        structlog.reset_defaults()


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Empty scratch directory for replicas"""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def fake_executable(tmp_path: Path) -> Path:
    """A 5000 byte stand-in for the running program"""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    exe = bin_dir / "fakeprog"
    exe.write_bytes((bytes(range(256)) * 20)[:FAKE_EXECUTABLE_SIZE])
    os.chmod(exe, 0o755)
    return exe


@pytest.fixture
def patched_locator(monkeypatch, fake_executable: Path) -> Path:
    """Make the fake executable look like the running program"""
    monkeypatch.setattr("self_replica.replica.locate_self", lambda: fake_executable)
    return fake_executable
