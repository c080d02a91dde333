"""Static extension/MIME lookup tables mapping inputs to extractor kinds."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from nosy.pipeline.models import Extension, ExtractorKind, Mime

# (kind, MIME types, extensions). Several keys may point at the same kind.
KIND_TABLE: tuple[tuple[ExtractorKind, tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ExtractorKind.HTML_NATIVE,
        # XML-declared XHTML is refined to application/xhtml+xml before lookup.
        ("text/html", "application/xhtml+xml"),
        ("html", "htm", "xhtml"),
    ),
    (
        ExtractorKind.PDF_NATIVE,
        ("application/pdf",),
        ("pdf",),
    ),
    (
        ExtractorKind.PLAIN_TEXT,
        ("text/plain", "text/markdown"),
        ("txt", "text", "md"),
    ),
    (
        ExtractorKind.PANDOC,
        (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/msword",
            "application/vnd.oasis.opendocument.text",
            "application/rtf",
            "text/rtf",
            "application/epub+zip",
            "text/latex",
            "application/x-tex",
            "text/x-tex",
        ),
        ("docx", "doc", "odt", "rtf", "epub", "tex", "latex"),
    ),
    (
        ExtractorKind.WHISPER,
        (
            "audio/mpeg",
            "audio/mp3",
            "audio/x-mp3",
            "audio/wav",
            "audio/x-wav",
            "audio/mp4",
            "video/mp4",
        ),
        ("mp3", "wav", "mp4", "m4a"),
    ),
)


def _build_indices() -> tuple[Mapping[Mime, ExtractorKind], Mapping[Extension, ExtractorKind]]:
    mime_index: dict[Mime, ExtractorKind] = {}
    extension_index: dict[Extension, ExtractorKind] = {}
    for kind, mimes, extensions in KIND_TABLE:
        for mime in mimes:
            mime_index[Mime(mime)] = kind
        for extension in extensions:
            extension_index[Extension(extension)] = kind
    return MappingProxyType(mime_index), MappingProxyType(extension_index)


MIME_INDEX, EXTENSION_INDEX = _build_indices()


def kind_for_extension(extension: Extension | None) -> ExtractorKind:
    if extension is None:
        return ExtractorKind.UNSUPPORTED
    return EXTENSION_INDEX.get(extension, ExtractorKind.UNSUPPORTED)


def kind_for_mime(mime: Mime | None) -> ExtractorKind:
    if mime is None:
        return ExtractorKind.UNSUPPORTED
    return MIME_INDEX.get(mime, ExtractorKind.UNSUPPORTED)
