"""Argument checks run before any pipeline work starts."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping

from nosy.errors import NosyError
from nosy.extractors.pandoc_extractor import ensure_pandoc_available
from nosy.extractors.whisper_settings import resolve_whisper_model_path
from nosy.pipeline.models import ExtractorKind
from nosy.validation import require_absent, require_regular_file


def validate_extractor_kind(kind: ExtractorKind | None, environ: Mapping[str, str] | None = None) -> None:
    """Fail early when a forced backend cannot run on this machine."""

    if kind is ExtractorKind.PANDOC:
        ensure_pandoc_available()
    elif kind is ExtractorKind.WHISPER:
        resolve_whisper_model_path(environ)


def _check(errors: list[str], func: Callable[..., Any], *args: Any) -> None:
    try:
        func(*args)
    except NosyError as exc:
        errors.append(str(exc))


def collect_run_errors(
    *,
    output: Path,
    forced_kind: ExtractorKind | None,
    templates: tuple[Path | None, ...] = (),
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """Return every validation failure as a message; empty when all pass."""

    errors: list[str] = []
    _check(errors, require_absent, output)
    _check(errors, validate_extractor_kind, forced_kind, environ)
    for template in templates:
        if template is not None:
            _check(errors, require_regular_file, template)
    return errors
