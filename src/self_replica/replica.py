"""Scoped handles over replicas of the running executable.

A replica is a byte-exact, executable copy of the program the current
process runs from. It exists so another party, typically a container
runtime doing a volume mount, can be handed a private executable path::

    with create_replica() as replica:
        subprocess.run(["docker", "run", "-v", f"{replica}:{replica}", IMAGE, replica.display()])

The copy is deleted when the ``with`` block exits, when ``release()`` is
called, or at the latest when the handle is garbage collected or the
interpreter exits, whichever comes first. Deletion happens exactly once.

Replicas live in a shared temporary directory, so the usual caveats apply:
keep their lifetime short, trust the other users of the machine, and make
sure no temp cleaner reaps recently created files.
"""

import os
import shutil
import tempfile
import weakref
from pathlib import Path
from typing import Optional

from self_replica.config import resolve_scratch_dir
from self_replica.constants import REPLICA_PREFIX
from self_replica.errors import CleanupFailure, CopyFailure, log_error
from self_replica.locator import locate_self
from self_replica.logging import get_logger
from self_replica.replicator import replicate
from self_replica.types import ReplicaState

logger = get_logger(__name__)

_FACTORY_TOKEN = object()


def _remove_replica(path: Path, owned_dir: Optional[Path]) -> None:
    """Best-effort deletion of a replica. Never raises OSError."""
    try:
        path.unlink()
    except OSError as e:
        log_error(
            CleanupFailure(path, e.strerror or str(e)),
            context={"errno": e.errno},
            logger=logger,
            level="warning",
        )
    else:
        logger.debug("replica_released", path=str(path))

    if owned_dir is None:
        return
    try:
        shutil.rmtree(owned_dir)
    except OSError as e:
        log_error(
            CleanupFailure(owned_dir, e.strerror or str(e)),
            context={"errno": e.errno},
            logger=logger,
            level="warning",
        )


class Replica(os.PathLike):
    """A temporary copy of the running executable.

    Obtain one from ``create_replica()`` or ``create_named_replica()``; the
    handle is the only owner of the file and the only thing that deletes it.
    """

    def __init__(self, path: Path, owned_dir: Optional[Path] = None, *, _token=None):
        if _token is not _FACTORY_TOKEN:
            raise TypeError("Replica handles are created by create_replica()")
        self._path = path
        self._parent = owned_dir or path.parent
        self._finalizer = weakref.finalize(self, _remove_replica, path, owned_dir)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def parent(self) -> Path:
        """Directory holding the copy."""
        return self._parent

    @property
    def state(self) -> ReplicaState:
        return ReplicaState.ACTIVE if self._finalizer.alive else ReplicaState.RELEASED

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def display(self) -> str:
        return str(self._path)

    def release(self) -> None:
        """Delete the copy now. Safe to call any number of times."""
        self._finalizer()

    def __fspath__(self) -> str:
        return os.fspath(self._path)

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return f"Replica(path={str(self._path)!r}, state={self.state.name})"

    def __enter__(self) -> "Replica":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


def create_replica(scratch_dir: Optional[os.PathLike | str] = None) -> Replica:
    """Create a uniquely named copy of the running program in scratch_dir.

    Raises LocateFailure when the running executable cannot be resolved and
    CopyFailure when the copy cannot be written; no file is left behind in
    either case.
    """
    source = locate_self()
    path = replicate(source, scratch_dir)
    replica = Replica(path, _token=_FACTORY_TOKEN)

    logger.info("replica_created", source=str(source), path=str(path))
    return replica


def create_named_replica(scratch_dir: Optional[os.PathLike | str] = None) -> Replica:
    """Create a copy of the running program that keeps its file name.

    The copy is placed in a private directory under scratch_dir so the name
    cannot clash; releasing the handle removes the directory too.
    """
    source = locate_self()
    directory = resolve_scratch_dir(scratch_dir)

    try:
        owned_dir = Path(tempfile.mkdtemp(prefix=REPLICA_PREFIX, dir=directory))
    except OSError as e:
        raise CopyFailure("create", source, directory, str(e)) from e

    try:
        path = replicate(source, owned_dir, name=source.name)
    except BaseException:
        shutil.rmtree(owned_dir, ignore_errors=True)
        raise

    replica = Replica(path, owned_dir, _token=_FACTORY_TOKEN)

    logger.info(
        "replica_created", source=str(source), path=str(path), parent=str(owned_dir)
    )
    return replica
