"""Error handling for executable replication."""
from pathlib import Path
from typing import Any, Dict, Optional

from self_replica.logging import get_logger


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[Any] = None,
    level: str = "error",
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, ReplicaError):
        error_info["details"] = error.details

    getattr(logger, level)("replica_error", **error_info)


class ReplicaError(Exception):
    """Base error class for replication."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class LocateFailure(ReplicaError):
    """The running executable's own path could not be determined."""

    def __init__(self, reason: str, candidate: Optional[Path] = None):
        details: Dict[str, Any] = {"reason": reason}
        if candidate is not None:
            details["candidate"] = str(candidate)
        super().__init__(f"Cannot locate running executable: {reason}", details)
        self.candidate = candidate


class CopyFailure(ReplicaError):
    """Creating the replica failed at a specific step."""

    STEPS = ("open_source", "create", "read", "write", "permissions", "unique_name")

    def __init__(
        self,
        step: str,
        source: Path,
        destination: Optional[Path] = None,
        reason: str = "",
    ):
        if step not in self.STEPS:
            raise ValueError(f"Unknown copy step: {step}")
        message = f"Copy failed during {step} of {source}"
        if destination is not None:
            message += f" to {destination}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            details={
                "step": step,
                "source": str(source),
                "destination": str(destination) if destination else None,
            },
        )
        self.step = step
        self.source = source
        self.destination = destination


class CleanupFailure(ReplicaError):
    """Deleting a replica during release did not succeed. Logged, never raised."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Failed to remove replica {path}: {reason}",
            details={"path": str(path)},
        )
        self.path = path
