"""Document conversion through the external ``pandoc`` executable."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import shutil

from nosy.errors import ExtractionError, ExtractorUnavailableError
from nosy.extractors.base import decode_utf8, write_extracted_text
from nosy.pipeline.models import Extension, Mime
from nosy.pipeline.progress import ProgressSink

logger = logging.getLogger(__name__)

PANDOC_EXECUTABLE = "pandoc"
PANDOC_INSTALLATION_HINT = (
    "Please install pandoc by following https://pandoc.org/installing.html "
    "and ensure it is included in your PATH."
)
PANDOC_OUTPUT_ARGS = ("--to", "plain", "--wrap=none", "--markdown-headings=atx")

_FORMAT_BY_EXTENSION = {
    "docx": "docx",
    "doc": "doc",
    "odt": "odt",
    "rtf": "rtf",
    "epub": "epub",
    "md": "markdown",
    "html": "html",
    "htm": "html",
    "xhtml": "html",
    "txt": "plain",
    "text": "plain",
    "tex": "latex",
    "latex": "latex",
}

_FORMAT_BY_MIME = {
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "doc",
    "application/vnd.oasis.opendocument.text": "odt",
    "application/rtf": "rtf",
    "text/rtf": "rtf",
    "application/epub+zip": "epub",
    "text/markdown": "markdown",
    "text/html": "html",
    "application/xhtml+xml": "html",
    "text/plain": "plain",
    "text/latex": "latex",
    "application/x-tex": "latex",
    "text/x-tex": "latex",
}


def pandoc_input_format(extension: Extension | None, mime: Mime | None) -> str | None:
    """Return the pandoc reader name for the artifact, if one is known.

    The extension decides first; the MIME type is consulted only when the
    extension is absent or unknown to pandoc.
    """

    if extension is not None and extension.value in _FORMAT_BY_EXTENSION:
        return _FORMAT_BY_EXTENSION[extension.value]
    if mime is not None:
        return _FORMAT_BY_MIME.get(mime.value)
    return None


def build_pandoc_args(content_path: Path, input_format: str | None) -> list[str]:
    args = [PANDOC_EXECUTABLE]
    if input_format:
        args.append(f"--from={input_format}")
    args.extend(PANDOC_OUTPUT_ARGS)
    args.append(str(content_path))
    return args


def ensure_pandoc_available() -> str:
    """Return the resolved pandoc binary or raise before anything is spawned."""

    resolved = shutil.which(PANDOC_EXECUTABLE)
    if resolved is None:
        raise ExtractorUnavailableError(
            "pandoc is not installed or not in PATH",
            tool=PANDOC_EXECUTABLE,
            hint=PANDOC_INSTALLATION_HINT,
        )
    return resolved


class PandocExtractor:
    """Convert office, ebook and markup documents to plain text with pandoc."""

    name = "pandoc"

    async def extract(
        self,
        content_path: Path,
        extension: Extension | None,
        mime: Mime | None,
        workdir: Path,
        progress: ProgressSink,
    ) -> Path:
        input_format = pandoc_input_format(extension, mime)
        ensure_pandoc_available()

        args = build_pandoc_args(content_path, input_format)
        logger.debug("Running external CLI: %s", args)

        progress.update("Extracting content with pandoc...")
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ExtractorUnavailableError(
                "pandoc is not installed or not in PATH",
                tool=PANDOC_EXECUTABLE,
                hint=PANDOC_INSTALLATION_HINT,
            ) from exc
        except OSError as exc:
            raise ExtractionError(f"Failed to run pandoc: {exc}", extractor=self.name) from exc

        stdout, stderr = await process.communicate()

        progress.update("Processing pandoc output...")
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ExtractionError(
                f"pandoc failed with exit code {process.returncode}: {detail}",
                extractor=self.name,
            )

        text = decode_utf8(stdout, extractor=self.name, source="pandoc output")
        return await write_extracted_text(text, workdir, extractor=self.name)
