from __future__ import annotations

import shutil
import uuid
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def out_dir(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Repo-local build output root, so tests never touch the host tmp dir."""
    root = Path.cwd() / ".pytest-local"
    root.mkdir(parents=True, exist_ok=True)
    path = root / f"case-{uuid.uuid4().hex}"
    path.mkdir(parents=False, exist_ok=False)
    monkeypatch.delenv("OUTDIR_TEMPDIR_OUT_DIR", raising=False)
    monkeypatch.setenv("OUT_DIR", str(path))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
