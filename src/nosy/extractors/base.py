"""Shared extractor contract and the output rules every backend follows."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from nosy.errors import ExtractionError, StagingError
from nosy.pipeline.models import EXTRACTED_CONTENT_FILENAME, Extension, Mime
from nosy.pipeline.progress import ProgressSink

logger = logging.getLogger(__name__)


@runtime_checkable
class Extractor(Protocol):
    """Protocol that every extraction backend must implement."""

    name: str

    async def extract(
        self,
        content_path: Path,
        extension: Extension | None,
        mime: Mime | None,
        workdir: Path,
        progress: ProgressSink,
    ) -> Path:
        """Convert ``content_path`` to plain UTF-8 text staged in ``workdir``."""


def decode_utf8(raw: bytes, *, extractor: str, source: str) -> str:
    """Decode strictly; invalid bytes are an extraction failure."""

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"{source} is not valid UTF-8", extractor=extractor) from exc


async def read_source(path: Path) -> bytes:
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise StagingError(f"Failed to read content for extraction: {exc}", path=str(path)) from exc


async def write_extracted_text(text: str, workdir: Path, *, extractor: str) -> Path:
    """Trim ``text`` and stage it as ``<workdir>/ext``.

    Empty output after trimming is never a success.
    """

    cleaned = text.strip()
    if not cleaned:
        raise ExtractionError(f"{extractor} produced empty output", extractor=extractor)

    target = workdir / EXTRACTED_CONTENT_FILENAME
    try:
        await asyncio.to_thread(target.write_text, cleaned, encoding="utf-8")
    except OSError as exc:
        raise StagingError(f"Failed to write extracted text content: {exc}", path=str(target)) from exc
    logger.debug("Wrote %d chars of extracted text to %s", len(cleaned), target)
    return target
