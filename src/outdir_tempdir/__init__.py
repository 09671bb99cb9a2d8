"""outdir_tempdir package."""

from .config import NAMESPACE_DIR, RuntimeConfig, load_runtime_config
from .errors import (
    EnvironmentUnavailableError,
    InitError,
    InvalidPathError,
    ParentDirError,
    RootDirError,
    TempDirIOError,
)
from .tempdir import TempDir

__all__ = [
    "EnvironmentUnavailableError",
    "InitError",
    "InvalidPathError",
    "NAMESPACE_DIR",
    "ParentDirError",
    "RootDirError",
    "RuntimeConfig",
    "TempDir",
    "TempDirIOError",
    "load_runtime_config",
]
