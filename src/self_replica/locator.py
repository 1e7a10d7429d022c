"""Resolve the file backing the running process."""

import os
import sys
from pathlib import Path
from typing import Optional

from self_replica.constants import DELETED_SUFFIX, PROC_SELF_LINKS
from self_replica.errors import LocateFailure
from self_replica.logging import get_logger

logger = get_logger(__name__)


def get_proc_link() -> Optional[Path]:
    """Get the kernel's link to the running image for the current platform."""
    for prefix, template in PROC_SELF_LINKS.items():
        if sys.platform.startswith(prefix):
            return Path(template.format(pid=os.getpid()))
    return None


def _from_proc_link(link: Path) -> Optional[Path]:
    try:
        target = os.readlink(link)
    except OSError as e:
        logger.debug("proc_link_unreadable", link=str(link), error=str(e))
        return None

    if target.endswith(DELETED_SUFFIX):
        raise LocateFailure("executable was deleted after the process started", Path(target))

    path = Path(target)
    if not path.is_absolute():
        path = (link.parent / path).resolve()
    if not path.is_file():
        raise LocateFailure("executable no longer exists", path)
    return path


def _from_sys_executable() -> Path:
    if not sys.executable:
        raise LocateFailure("interpreter did not report an executable path")

    path = Path(sys.executable).resolve()
    if not path.is_file():
        raise LocateFailure("reported executable is not a file", path)
    return path


def locate_self() -> Path:
    """Return the absolute path of the executable image this process runs from.

    Uses the kernel's self link where the platform has one and falls back to
    ``sys.executable`` elsewhere. Raises ``LocateFailure`` when the image cannot
    be resolved, including when it was removed after startup.
    """
    path = None
    link = get_proc_link()
    if link is not None and os.path.lexists(link):
        path = _from_proc_link(link)

    if path is None:
        path = _from_sys_executable()

    logger.debug("self_located", path=str(path))
    return path
