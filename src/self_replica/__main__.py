"""Replicate the running program and optionally hand it to a command.

    python -m self_replica
    python -m self_replica docker run -t -v {}:{} alpine:3 {} inside

Every ``{}`` argument token is replaced by the replica path. The copy is
removed once the command exits.
"""
import subprocess
import sys
from typing import List, Optional

from self_replica.config import load_settings
from self_replica.errors import ReplicaError, log_error
from self_replica.logging import configure_logging, get_logger
from self_replica.replica import create_replica

logger = get_logger(__name__)

PLACEHOLDER = "{}"


def substitute_path(command: List[str], path: str) -> List[str]:
    """Replace every placeholder in the command with the replica path."""
    return [arg.replace(PLACEHOLDER, path) for arg in command]


def main(argv: Optional[List[str]] = None) -> int:
    """Run the replica command line."""
    command = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        replica = create_replica(settings.scratch_dir)
    except ReplicaError as e:
        log_error(e, logger=logger)
        print(f"self-replica: {e}", file=sys.stderr)
        return 1

    with replica:
        print(replica.display(), flush=True)
        if not command:
            return 0

        args = substitute_path(command, replica.display())
        logger.info("running_command", cmd=args)
        try:
            result = subprocess.run(args)
        except OSError as e:
            print(f"self-replica: cannot run {args[0]}: {e}", file=sys.stderr)
            return 1

    logger.debug("command_complete", returncode=result.returncode)
    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
