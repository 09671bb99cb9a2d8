"""Temporary directories rooted in the build output tree.

Directories are laid out as ``<out-dir>/outdir-tempdir-tmp/<leaf>`` where the
leaf is either ``test-<random>`` or a caller supplied relative path::

    with TempDir.create_with_path("foo/bar/baz").enable_auto_remove() as dir_:
        (dir_.path / "data.txt").write_text("...")
    # foo/bar/baz is gone here

Handles that never enable auto-remove leave their directory in place.
"""

from __future__ import annotations

import os
import shutil
import uuid
import weakref
from pathlib import Path, PurePath
from typing import Any, Mapping

from .config import load_runtime_config, namespace_root
from .errors import InvalidPathError, ParentDirError, RootDirError, TempDirIOError
from .logging_config import get_logger, log_event


DEFAULT_LEAF_PREFIX = "test-"


def cleanse_path(path: str | os.PathLike[str]) -> PurePath:
    """Drop ``.`` segments and reject anything that could leave the namespace root."""
    raw = PurePath(path)
    if raw.anchor:
        raise RootDirError(path)

    parts: list[str] = []
    for part in raw.parts:
        if part == os.pardir:
            raise ParentDirError(path)
        if part == os.curdir:
            continue
        parts.append(part)
    return PurePath(*parts)


def random_leaf() -> PurePath:
    return PurePath(f"{DEFAULT_LEAF_PREFIX}{uuid.uuid4().hex}")


def remove_tree(path: Path, stop_at: Path) -> bool:
    """Remove ``path`` and any ancestors left empty below ``stop_at``.

    Never raises; failures are logged and reported through the return value.
    """
    logger = get_logger(__name__)
    try:
        shutil.rmtree(path)
    except OSError as exc:
        log_event(logger, "warning", "tempdir_remove_failed", path=str(path), error=str(exc))
        return False

    parent = path.parent
    while parent != stop_at and parent.is_relative_to(stop_at):
        try:
            parent.rmdir()
        except OSError:
            # Not empty or already gone.
            break
        parent = parent.parent

    log_event(logger, "debug", "tempdir_removed", path=str(path))
    return True


def first_missing_level(full: Path, root: Path) -> Path | None:
    """Highest directory between ``root`` and ``full`` that does not exist yet."""
    missing = None
    candidate = full
    while candidate != root and not candidate.exists():
        missing = candidate
        candidate = candidate.parent
    return missing


class _Removal:
    # Must not reference the owning TempDir, or the finalizer would keep it alive.
    def __init__(self, path: Path, stop_at: Path) -> None:
        self.path = path
        self.stop_at = stop_at
        self.enabled = False

    def __call__(self) -> None:
        if self.enabled:
            remove_tree(self.path, self.stop_at)


class TempDir:
    """Handle to a directory under the build output root.

    Cleanup runs at most once: on leaving a ``with`` block, on ``close()``,
    or when the handle is garbage collected, whichever comes first. It only
    deletes anything if ``enable_auto_remove()`` was called by then.
    """

    def __init__(
        self,
        path: Path,
        root: Path,
        target: PurePath,
        prune_stop: Path | None = None,
    ) -> None:
        self._path = path
        self._root = root
        self._target = target
        # Levels at or above prune_stop existed before this handle and are never pruned.
        self._removal = _Removal(path, prune_stop if prune_stop is not None else path.parent)
        self._finalizer = weakref.finalize(self, self._removal)

    @classmethod
    def create_default(cls, *, env: Mapping[str, str] | None = None) -> TempDir:
        return cls._create(random_leaf(), env=env, explicit=False)

    @classmethod
    def create_with_path(
        cls,
        relative: str | os.PathLike[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> TempDir:
        target = cleanse_path(relative)
        if not target.parts:
            raise InvalidPathError(relative, "path resolves to the namespace root")
        return cls._create(target, env=env, explicit=True)

    @classmethod
    def _create(
        cls,
        target: PurePath,
        *,
        env: Mapping[str, str] | None,
        explicit: bool,
    ) -> TempDir:
        root = namespace_root(load_runtime_config(env))
        full = root / target
        if full == root or not full.is_relative_to(root):
            raise InvalidPathError(target)

        created_top = first_missing_level(full, root)
        try:
            full.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TempDirIOError(full, exc) from exc

        resolved_root = root.resolve()
        resolved = full.resolve()
        if resolved == resolved_root or not resolved.is_relative_to(resolved_root):
            raise InvalidPathError(target, "path escapes the namespace root via a symlink")

        if created_top is None:
            prune_stop = resolved.parent
        else:
            prune_stop = created_top.parent.resolve()

        log_event(
            get_logger(__name__),
            "debug",
            "tempdir_created",
            path=str(resolved),
            explicit=explicit,
        )
        return cls(resolved, resolved_root, target, prune_stop)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def root(self) -> Path:
        return self._root

    @property
    def target(self) -> PurePath:
        return self._target

    @property
    def auto_remove(self) -> bool:
        return self._removal.enabled

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def enable_auto_remove(self) -> TempDir:
        """Flag the directory for removal at scope exit and return this handle."""
        self._removal.enabled = True
        log_event(
            get_logger(__name__),
            "debug",
            "tempdir_auto_remove_enabled",
            path=str(self._path),
        )
        return self

    def close(self) -> None:
        self._finalizer()

    def __enter__(self) -> TempDir:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __fspath__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={str(self._path)!r}, "
            f"auto_remove={self.auto_remove}, closed={self.closed})"
        )
