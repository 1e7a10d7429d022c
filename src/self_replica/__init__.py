"""Disposable executable copies of the running program."""

from self_replica.types import ReplicaState
from self_replica.config import Settings, load_settings
from self_replica.locator import locate_self
from self_replica.replicator import replicate
from self_replica.replica import Replica, create_replica, create_named_replica
from self_replica.logging import configure_logging, get_logger
from self_replica.errors import (
    ReplicaError,
    LocateFailure,
    CopyFailure,
    CleanupFailure,
)

__version__ = "0.1.0"

__all__ = [
    # Handles
    "Replica",
    "ReplicaState",
    "create_replica",
    "create_named_replica",

    # Building blocks
    "locate_self",
    "replicate",

    # Configuration
    "Settings",
    "load_settings",
    "configure_logging",
    "get_logger",

    # Error types
    "ReplicaError",
    "LocateFailure",
    "CopyFailure",
    "CleanupFailure",
]
