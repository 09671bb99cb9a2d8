from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values, find_dotenv

from .errors import EnvironmentUnavailableError


OUT_DIR_ENV_VARS = ("OUTDIR_TEMPDIR_OUT_DIR", "OUT_DIR")
NAMESPACE_DIR = "outdir-tempdir-tmp"
DEFAULT_LOG_FORMAT = "auto"

_VALID_LOG_FORMATS = {"auto", "json", "console"}
_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


@dataclass(frozen=True)
class RuntimeConfig:
    out_dir: str | None = None
    log_level: int | None = None
    log_format: str = DEFAULT_LOG_FORMAT


def normalize_log_level(value: str) -> int:
    level = str(value).strip().upper()
    if level in _VALID_LOG_LEVELS:
        return logging.getLevelName(level)

    # Also allow numeric logging levels.
    try:
        numeric = int(level)
    except ValueError as exc:
        raise ValueError(
            f"Invalid OUTDIR_TEMPDIR_LOG_LEVEL '{value}'. "
            f"Expected one of {sorted(_VALID_LOG_LEVELS)} or a numeric level."
        ) from exc

    if numeric < 0:
        raise ValueError(
            f"Invalid OUTDIR_TEMPDIR_LOG_LEVEL '{value}'. Numeric levels must be >= 0."
        )
    return numeric


def normalize_log_format(value: str) -> str:
    fmt = str(value).strip().lower()
    if fmt not in _VALID_LOG_FORMATS:
        raise ValueError(
            f"Invalid OUTDIR_TEMPDIR_LOG_FORMAT '{value}'. "
            f"Expected one of {sorted(_VALID_LOG_FORMATS)}."
        )
    return fmt


def parse_optional_dir(value: str) -> str | None:
    stripped = str(value).strip()
    if not stripped:
        return None
    return str(Path(stripped).expanduser())


def read_environment() -> dict[str, str]:
    """Process environment layered over a ``.env`` file found from the cwd.

    The ``.env`` values are only read, never exported into ``os.environ``.
    """
    merged: dict[str, str] = {}
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        merged.update(
            (key, value) for key, value in dotenv_values(dotenv_path).items() if value is not None
        )
    merged.update(os.environ)
    return merged


def load_runtime_config(env: Mapping[str, str] | None = None) -> RuntimeConfig:
    source = env if env is not None else read_environment()

    out_dir = None
    for name in OUT_DIR_ENV_VARS:
        out_dir = parse_optional_dir(source.get(name, ""))
        if out_dir is not None:
            break

    raw_level = source.get("OUTDIR_TEMPDIR_LOG_LEVEL", "")
    log_level = normalize_log_level(raw_level) if raw_level.strip() else None
    log_format = normalize_log_format(
        source.get("OUTDIR_TEMPDIR_LOG_FORMAT", DEFAULT_LOG_FORMAT)
    )

    return RuntimeConfig(out_dir=out_dir, log_level=log_level, log_format=log_format)


def resolve_out_dir(config: RuntimeConfig) -> Path:
    if config.out_dir is None:
        raise EnvironmentUnavailableError(
            "Build output root not found. Set one of "
            f"{', '.join(OUT_DIR_ENV_VARS)} to the build output directory."
        )
    return Path(config.out_dir).resolve()


def namespace_root(config: RuntimeConfig) -> Path:
    return resolve_out_dir(config) / NAMESPACE_DIR
