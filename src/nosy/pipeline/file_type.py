"""Content-type classification: extension first, bounded MIME sniff second."""

from __future__ import annotations

import logging
from pathlib import Path

import magic

from nosy.errors import ClassificationError, StagingError
from nosy.pipeline.indices import kind_for_extension, kind_for_mime
from nosy.pipeline.models import Classification, Extension, ExtractorKind, Mime

logger = logging.getLogger(__name__)

MIME_SNIFF_BYTES = 8 * 1024
GENERIC_XML_MIMES = frozenset({"text/xml", "application/xml"})
XHTML_NAMESPACE = b"http://www.w3.org/1999/xhtml"


def file_extension(path: Path) -> Extension | None:
    """Return the normalized extension of ``path``, if it has one."""

    suffix = path.suffix
    if not suffix or suffix == ".":
        return None
    return Extension(suffix)


def read_prefix(path: Path, limit: int = MIME_SNIFF_BYTES) -> bytes:
    try:
        with path.open("rb") as handle:
            return handle.read(limit)
    except OSError as exc:
        raise StagingError(f"Failed to read file prefix for MIME sniffing: {exc}", path=str(path)) from exc


def sniff_mime(path: Path, limit: int = MIME_SNIFF_BYTES) -> Mime:
    """Infer a MIME type from the first ``limit`` bytes of ``path``."""

    prefix = read_prefix(path, limit)
    try:
        detected = magic.from_buffer(prefix, mime=True)
    except magic.MagicException as exc:
        raise ClassificationError(f"MIME sniffing failed for '{path}': {exc}") from exc
    return refine_xml_mime(Mime(detected), prefix)


def refine_xml_mime(mime: Mime, prefix: bytes) -> Mime:
    """Report XHTML as ``application/xhtml+xml`` when libmagic only sees XML.

    libmagic classifies documents opening with an ``<?xml`` declaration as
    generic XML before looking at the root element.
    """

    if mime.value in GENERIC_XML_MIMES and XHTML_NAMESPACE in prefix:
        return Mime("application/xhtml+xml")
    return mime


def classify(path: Path, forced_kind: ExtractorKind | None = None) -> Classification:
    """Pick the extractor kind for ``path``.

    Precedence is forced kind, then extension table, then MIME table.
    File bytes are only read when the extension does not decide.
    """

    if forced_kind is not None:
        logger.debug("Using forced extractor kind: %s", forced_kind.value)
        return Classification(kind=forced_kind, forced=True)

    extension = file_extension(path)
    kind = kind_for_extension(extension)
    logger.debug("Extractor kind by extension %s: %s", extension, kind.value)
    if kind is not ExtractorKind.UNSUPPORTED:
        return Classification(kind=kind, extension=extension)

    mime = sniff_mime(path)
    kind = kind_for_mime(mime)
    logger.debug("Extractor kind by mime %s: %s", mime, kind.value)
    return Classification(kind=kind, extension=extension, mime=mime)
