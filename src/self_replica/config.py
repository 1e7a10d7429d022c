"""Environment-driven settings."""
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from self_replica.constants import LOG_LEVEL_ENV, SCRATCH_DIR_ENV
from self_replica.logging import DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Settings:
    """Replication settings"""
    scratch_dir: Path
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from environment variables, falling back to platform defaults."""
    env = os.environ if environ is None else environ

    scratch = env.get(SCRATCH_DIR_ENV) or tempfile.gettempdir()
    level = (env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()

    return Settings(scratch_dir=Path(scratch).absolute(), log_level=level)


def resolve_scratch_dir(scratch_dir: Optional[os.PathLike | str] = None) -> Path:
    """Explicit directory wins over the environment."""
    if scratch_dir is not None:
        return Path(scratch_dir).absolute()
    return load_settings().scratch_dir
