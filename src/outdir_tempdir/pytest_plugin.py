from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest

from .config import load_runtime_config
from .logging_config import configure_logging
from .tempdir import TempDir


TempDirFactory = Callable[..., TempDir]


def pytest_configure(config: pytest.Config) -> None:
    runtime = load_runtime_config()
    if runtime.log_level is not None:
        configure_logging(runtime.log_level, runtime.log_format)


@pytest.fixture
def outdir_tempdir() -> Iterator[TempDir]:
    """Random directory under the build output root, removed after the test."""
    with TempDir.create_default().enable_auto_remove() as handle:
        yield handle


@pytest.fixture
def outdir_tempdir_factory() -> Iterator[TempDirFactory]:
    handles: list[TempDir] = []

    def _make(
        relative: str | os.PathLike[str] | None = None,
        *,
        auto_remove: bool = True,
    ) -> TempDir:
        if relative is None:
            handle = TempDir.create_default()
        else:
            handle = TempDir.create_with_path(relative)
        if auto_remove:
            handle.enable_auto_remove()
        handles.append(handle)
        return handle

    try:
        yield _make
    finally:
        for handle in reversed(handles):
            handle.close()
