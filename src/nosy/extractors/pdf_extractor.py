"""PDF text-layer extraction in stable page and block order."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pymupdf

from nosy.errors import ExtractionError
from nosy.extractors.base import write_extracted_text
from nosy.extractors.normalization import normalize_whitespace
from nosy.pipeline.models import Extension, Mime
from nosy.pipeline.progress import ProgressSink

logger = logging.getLogger(__name__)


def _page_blocks(page: pymupdf.Page) -> list[str]:
    # (x0, y0, x1, y1, text, block_no, block_type); type 1 is an image
    rows = [row for row in page.get_text("blocks") if row[6] == 0]
    ordered = sorted(rows, key=lambda row: (row[1], row[0], row[5]))
    blocks: list[str] = []
    for row in ordered:
        text = normalize_whitespace(row[4])
        if text:
            blocks.append(text)
    return blocks


def extract_pdf_text(path: Path) -> str:
    """Return the embedded text layer of ``path``, one paragraph per block."""

    try:
        with pymupdf.open(path, filetype="pdf") as doc:
            pages: list[str] = []
            for page_index, page in enumerate(doc, start=1):
                blocks = _page_blocks(page)
                if not blocks:
                    logger.debug("PDF page %d has no embedded text", page_index)
                    continue
                pages.append("\n".join(blocks))
    except (pymupdf.FileDataError, RuntimeError, ValueError, OSError) as exc:
        raise ExtractionError(f"Failed to extract text from PDF content: {exc}", extractor="pdf") from exc

    return "\n\n".join(pages)


class PdfExtractor:
    """Extract embedded text from PDFs; scanned pages are not OCR'd."""

    name = "pdf"

    async def extract(
        self,
        content_path: Path,
        extension: Extension | None,
        mime: Mime | None,
        workdir: Path,
        progress: ProgressSink,
    ) -> Path:
        progress.update("Extracting text layer from PDF...")
        text = await asyncio.to_thread(extract_pdf_text, content_path)
        if not text.strip():
            raise ExtractionError(
                "PDF has no embedded text layer (image-only PDFs are not supported)",
                extractor=self.name,
            )
        return await write_extracted_text(text, workdir, extractor=self.name)
