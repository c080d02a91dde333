"""Extraction backends and kind-based dispatch."""

from __future__ import annotations

import logging
from typing import Mapping

from nosy.errors import ExtractionError, ExtractorUnavailableError
from nosy.extractors.base import Extractor
from nosy.extractors.pandoc_extractor import PandocExtractor
from nosy.pipeline.models import ExtractorKind

logger = logging.getLogger(__name__)

try:
    from nosy.extractors.html_extractor import HtmlExtractor
except ImportError:
    HtmlExtractor = None
    logger.warning("HTML support unavailable: install 'readability-lxml' and 'beautifulsoup4'")

try:
    from nosy.extractors.pdf_extractor import PdfExtractor
except ImportError:
    PdfExtractor = None
    logger.warning("PDF support unavailable: install 'pymupdf'")

try:
    from nosy.extractors.whisper_extractor import WhisperExtractor
except ImportError:
    WhisperExtractor = None
    logger.warning("Speech support unavailable: install 'av' and 'pywhispercpp'")

_INSTALL_HINTS = {
    ExtractorKind.HTML_NATIVE: "Install 'readability-lxml' and 'beautifulsoup4' to enable it.",
    ExtractorKind.PDF_NATIVE: "Install 'pymupdf' to enable it.",
    ExtractorKind.WHISPER: "Install 'av' and 'pywhispercpp' to enable it.",
}


def _unavailable(kind: ExtractorKind) -> ExtractorUnavailableError:
    return ExtractorUnavailableError(
        f"{kind.value} extractor is unavailable",
        tool=kind.value,
        hint=_INSTALL_HINTS[kind],
    )


def build_extractor(kind: ExtractorKind, *, environ: Mapping[str, str] | None = None) -> Extractor:
    """Return a ready backend for ``kind``.

    Plain text and unsupported kinds never reach a backend; the pipeline
    handles both before dispatch.
    """

    if kind is ExtractorKind.HTML_NATIVE:
        if HtmlExtractor is None:
            raise _unavailable(kind)
        return HtmlExtractor()
    if kind is ExtractorKind.PDF_NATIVE:
        if PdfExtractor is None:
            raise _unavailable(kind)
        return PdfExtractor()
    if kind is ExtractorKind.PANDOC:
        return PandocExtractor()
    if kind is ExtractorKind.WHISPER:
        if WhisperExtractor is None:
            raise _unavailable(kind)
        return WhisperExtractor.from_env(environ)
    raise ExtractionError(f"No extraction backend for kind {kind.value}", extractor=kind.value)


__all__ = [
    "Extractor",
    "HtmlExtractor",
    "PandocExtractor",
    "PdfExtractor",
    "WhisperExtractor",
    "build_extractor",
]
