import tempfile
from pathlib import Path

from self_replica.config import Settings, load_settings, resolve_scratch_dir
from self_replica.constants import LOG_LEVEL_ENV, SCRATCH_DIR_ENV


def test_load_settings_defaults():
    """Test the platform temp dir is used when nothing is configured"""
    settings = load_settings({})

    assert settings == Settings(
        scratch_dir=Path(tempfile.gettempdir()).absolute(), log_level="INFO"
    )


def test_load_settings_from_environment(tmp_path: Path):
    settings = load_settings({SCRATCH_DIR_ENV: str(tmp_path), LOG_LEVEL_ENV: "debug"})

    assert settings.scratch_dir == tmp_path
    assert settings.log_level == "DEBUG"


def test_empty_values_fall_back():
    settings = load_settings({SCRATCH_DIR_ENV: "", LOG_LEVEL_ENV: ""})

    assert settings.scratch_dir == Path(tempfile.gettempdir()).absolute()
    assert settings.log_level == "INFO"


def test_explicit_scratch_dir_wins(monkeypatch, tmp_path: Path):
    """Test an explicit directory overrides the environment"""
    monkeypatch.setenv(SCRATCH_DIR_ENV, "/nonexistent")

    assert resolve_scratch_dir(tmp_path) == tmp_path
    assert resolve_scratch_dir(str(tmp_path)) == tmp_path
    assert resolve_scratch_dir() == Path("/nonexistent").absolute()


def test_relative_scratch_dir_is_absolute(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)

    assert resolve_scratch_dir("scratch") == tmp_path / "scratch"
