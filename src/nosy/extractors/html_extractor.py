"""Readability-style main-content extraction for HTML documents."""

from __future__ import annotations

import asyncio
from pathlib import Path

from bs4 import BeautifulSoup
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

from nosy.errors import ExtractionError
from nosy.extractors.base import read_source, write_extracted_text
from nosy.extractors.normalization import decode_text, normalize_whitespace
from nosy.pipeline.models import Extension, Mime
from nosy.pipeline.progress import ProgressSink

_BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "blockquote", "pre", "td"]


def _content_blocks(fragment: str) -> list[str]:
    soup = BeautifulSoup(fragment, "lxml")
    body = soup.body or soup

    parts: list[str] = []
    for node in body.find_all(_BLOCK_TAGS):
        # nested block tags are reported by their innermost element
        if node.find(_BLOCK_TAGS):
            continue
        text = normalize_whitespace(node.get_text(" ", strip=True))
        if text:
            parts.append(text)

    if parts:
        return parts

    fallback = normalize_whitespace(body.get_text(" ", strip=True))
    return [fallback] if fallback else []


def extract_main_text(html: str) -> str:
    """Return the readable main text of ``html`` as blank-line separated blocks."""

    try:
        summary = Document(html).summary(html_partial=True)
    except (Unparseable, ParserError, ValueError) as exc:
        raise ExtractionError(f"Failed to parse HTML document: {exc}", extractor="html") from exc

    blocks = _content_blocks(summary)
    if not blocks:
        raise ExtractionError("No readable content node found in HTML", extractor="html")
    return "\n\n".join(blocks)


class HtmlExtractor:
    """Extract the article body from an HTML page."""

    name = "html"

    async def extract(
        self,
        content_path: Path,
        extension: Extension | None,
        mime: Mime | None,
        workdir: Path,
        progress: ProgressSink,
    ) -> Path:
        progress.update("Reading HTML content...")
        raw = await read_source(content_path)
        try:
            html = decode_text(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ExtractionError(f"HTML content could not be decoded: {exc}", extractor=self.name) from exc

        progress.update("Extracting main content from HTML...")
        text = await asyncio.to_thread(extract_main_text, html)
        return await write_extracted_text(text, workdir, extractor=self.name)
