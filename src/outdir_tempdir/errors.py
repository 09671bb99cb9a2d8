from __future__ import annotations

from pathlib import PurePath


class InitError(Exception):
    """Raised when a temporary directory handle cannot be constructed."""


class EnvironmentUnavailableError(InitError):
    """Raised when the build-output root is not provided by the environment."""


class InvalidPathError(InitError, ValueError):
    """Raised when a requested relative path cannot live under the namespace root."""

    def __init__(self, path: str | PurePath, reason: str = "invalid path") -> None:
        self.path = PurePath(path)
        super().__init__(f"{reason}: {str(path)!r}")


class ParentDirError(InvalidPathError):
    def __init__(self, path: str | PurePath) -> None:
        super().__init__(path, "path contains a parent directory segment")


class RootDirError(InvalidPathError):
    def __init__(self, path: str | PurePath) -> None:
        super().__init__(path, "path is absolute or contains a root/drive")


class TempDirIOError(InitError):
    """Raised when the directory could not be created on disk."""

    def __init__(self, path: str | PurePath, error: OSError) -> None:
        self.path = PurePath(path)
        self.errno = error.errno
        super().__init__(f"Failed to create temporary directory {self.path}: {error}")
