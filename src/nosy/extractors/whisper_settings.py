"""Whisper model location resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from nosy.errors import ConfigurationError
from nosy.validation import require_regular_file

WHISPER_MODEL_PATH_ENV = "WHISPER_MODEL_PATH"


def resolve_whisper_model_path(environ: Mapping[str, str] | None = None) -> Path:
    """Read and validate ``WHISPER_MODEL_PATH``."""

    source: Mapping[str, str] = os.environ if environ is None else environ

    if WHISPER_MODEL_PATH_ENV not in source:
        raise ConfigurationError(f"{WHISPER_MODEL_PATH_ENV} is not set")
    value = source[WHISPER_MODEL_PATH_ENV]
    if not value.strip():
        raise ConfigurationError(f"{WHISPER_MODEL_PATH_ENV} is empty")

    path = Path(value)
    try:
        return require_regular_file(path)
    except ConfigurationError as exc:
        raise ConfigurationError(f"invalid whisper model path at {str(path)!r}: {exc.message}") from exc


@dataclass(frozen=True, slots=True)
class WhisperSettings:
    """Validated local speech-recognition settings."""

    model_path: Path
    n_threads: int = 1

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WhisperSettings":
        model_path = resolve_whisper_model_path(environ)
        return cls(model_path=model_path, n_threads=os.cpu_count() or 1)
