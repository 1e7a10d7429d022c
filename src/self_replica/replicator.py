"""Copy an executable image into a uniquely named scratch file."""

import os
from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from fuuid import b58_fuuid

from self_replica.config import resolve_scratch_dir
from self_replica.constants import (
    COPY_CHUNK_SIZE,
    EXECUTABLE_MODE,
    MAX_NAME_ATTEMPTS,
    PARTIAL_MODE,
    REPLICA_PREFIX,
)
from self_replica.errors import CopyFailure
from self_replica.logging import get_logger

logger = get_logger(__name__)

CREATE_FLAGS = os.O_CREAT | os.O_EXCL | os.O_WRONLY | getattr(os, "O_BINARY", 0)


def generate_replica_name() -> str:
    """Generate a high-entropy replica file name."""
    return f"{REPLICA_PREFIX}{b58_fuuid()}"


def create_destination(
    source: Path, directory: Path, name: Optional[str] = None
) -> Tuple[int, Path]:
    """Exclusively create the destination file and return (fd, path).

    Generated names are retried on collision up to MAX_NAME_ATTEMPTS times.
    A fixed name is attempted once.
    """
    attempts = 1 if name else MAX_NAME_ATTEMPTS

    for attempt in range(1, attempts + 1):
        destination = directory / (name or generate_replica_name())
        try:
            fd = os.open(destination, CREATE_FLAGS, PARTIAL_MODE)
        except FileExistsError as e:
            if name:
                raise CopyFailure("create", source, destination, "file exists") from e
            logger.debug(
                "replica_name_taken", destination=str(destination), attempt=attempt
            )
            continue
        except OSError as e:
            raise CopyFailure("create", source, destination, str(e)) from e
        return fd, destination

    raise CopyFailure(
        "unique_name", source, directory, f"no free name after {attempts} attempts"
    )


def copy_stream(src: BinaryIO, dst: BinaryIO, source: Path, destination: Path) -> int:
    """Stream all bytes from src to dst, returning the number copied."""
    copied = 0
    while True:
        try:
            chunk = src.read(COPY_CHUNK_SIZE)
        except OSError as e:
            raise CopyFailure("read", source, destination, str(e)) from e
        if not chunk:
            return copied
        try:
            dst.write(chunk)
        except OSError as e:
            raise CopyFailure("write", source, destination, str(e)) from e
        copied += len(chunk)


def make_executable(source: Path, destination: Path) -> None:
    """Set the executable bits on platforms that have them."""
    if os.name != "posix":
        return
    try:
        destination.chmod(EXECUTABLE_MODE)
    except OSError as e:
        raise CopyFailure("permissions", source, destination, str(e)) from e


def discard_partial(destination: Path) -> None:
    """Remove a destination left behind by a failed copy."""
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(
            "partial_replica_not_removed", destination=str(destination), error=str(e)
        )
    else:
        logger.debug("partial_replica_removed", destination=str(destination))


def replicate(
    source: os.PathLike | str,
    scratch_dir: Optional[os.PathLike | str] = None,
    *,
    name: Optional[str] = None,
) -> Path:
    """Copy source into scratch_dir and mark the copy executable.

    The file is fully written and closed before its mode is changed, so a
    returned path never refers to a partial or non-executable copy. On any
    failure the partially written destination is removed before the error
    propagates.
    """
    source = Path(source)
    directory = resolve_scratch_dir(scratch_dir)

    try:
        src = open(source, "rb")
    except OSError as e:
        raise CopyFailure("open_source", source, reason=str(e)) from e

    with src:
        fd, destination = create_destination(source, directory, name)
        try:
            try:
                with os.fdopen(fd, "wb") as dst:
                    copied = copy_stream(src, dst, source, destination)
            except OSError as e:
                raise CopyFailure("write", source, destination, str(e)) from e
            make_executable(source, destination)
        except BaseException:
            discard_partial(destination)
            raise

    logger.debug(
        "replica_written",
        source=str(source),
        destination=str(destination),
        bytes=copied,
    )
    return destination
