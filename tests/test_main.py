import os
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from self_replica import __main__ as cli
from self_replica.constants import SCRATCH_DIR_ENV
from self_replica.errors import LocateFailure

posix_only = pytest.mark.skipif(os.name != "posix", reason="requires /bin/sh")


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch, scratch_dir: Path):
    """Route replicas into the scratch dir and keep log lines off stdout"""
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    monkeypatch.setenv(SCRATCH_DIR_ENV, str(scratch_dir))
    with capture_logs() as logs:
        yield logs


def test_substitute_path():
    args = cli.substitute_path(["docker", "run", "-v", "{}:{}", "alpine:3", "{}", "inside"], "/tmp/r")

    assert args == ["docker", "run", "-v", "/tmp/r:/tmp/r", "alpine:3", "/tmp/r", "inside"]


def test_main_prints_path_and_cleans_up(capsys, patched_locator: Path, scratch_dir: Path):
    """Test the bare runner prints the replica path and removes it on exit"""
    assert cli.main([]) == 0

    printed = Path(capsys.readouterr().out.strip())
    assert printed.parent == scratch_dir
    assert not printed.exists()


@posix_only
def test_main_runs_command_with_replica(patched_locator: Path, scratch_dir: Path):
    code = cli.main(["/bin/sh", "-c", 'test -x "$0" && test "$(wc -c < "$0")" -eq 5000', "{}"])

    assert code == 0
    assert list(scratch_dir.iterdir()) == []


@posix_only
def test_main_returns_command_exit_code(patched_locator: Path, scratch_dir: Path):
    assert cli.main(["/bin/sh", "-c", "exit 3"]) == 3
    assert list(scratch_dir.iterdir()) == []


def test_main_missing_command(capsys, patched_locator: Path, scratch_dir: Path):
    assert cli.main([str(scratch_dir / "no-such-command")]) == 1
    assert "cannot run" in capsys.readouterr().err
    assert list(scratch_dir.iterdir()) == []


def test_main_locate_failure(monkeypatch, capsys):
    """Test startup errors are reported and exit non-zero"""
    def fail():
        raise LocateFailure("executable was deleted after the process started")

    monkeypatch.setattr("self_replica.replica.locate_self", fail)

    assert cli.main([]) == 1
    assert "Cannot locate running executable" in capsys.readouterr().err
