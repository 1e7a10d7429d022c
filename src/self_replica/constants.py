"""Replica naming, permission and copy constants."""

# Name layout: replicate_<base58 fuuid>
REPLICA_PREFIX = "replicate_"

# Collisions are practically impossible; bound the retries anyway
MAX_NAME_ATTEMPTS = 5

# Exclusive-create mode while the copy is incomplete, final mode once written
PARTIAL_MODE = 0o600
EXECUTABLE_MODE = 0o755

COPY_CHUNK_SIZE = 1024 * 1024

# Kernel links to the running image, keyed by sys.platform prefix
PROC_SELF_LINKS = {
    "linux": "/proc/self/exe",
    "android": "/proc/self/exe",
    "netbsd": "/proc/curproc/exe",
    "dragonfly": "/proc/curproc/file",
    "freebsd": "/proc/curproc/file",
    "sunos": "/proc/{pid}/path/a.out",
}

DELETED_SUFFIX = " (deleted)"

SCRATCH_DIR_ENV = "SELF_REPLICA_SCRATCH_DIR"
LOG_LEVEL_ENV = "SELF_REPLICA_LOG_LEVEL"
