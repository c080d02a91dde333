from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from nosy.errors import ExtractionError, ExtractorUnavailableError
from nosy.extractors.pandoc_extractor import (
    PANDOC_INSTALLATION_HINT,
    PandocExtractor,
    build_pandoc_args,
    pandoc_input_format,
)
from nosy.pipeline.models import Extension, Mime
from nosy.pipeline.progress import LoggingProgress


class _DummyProc:
    def __init__(self, *, stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self.returncode = returncode

    async def communicate(self) -> tuple[bytes, bytes]:
        return self._stdout, self._stderr


def test_input_format_prefers_extension() -> None:
    assert pandoc_input_format(Extension("md"), Mime("text/html")) == "markdown"
    assert pandoc_input_format(Extension("HTM"), None) == "html"
    assert pandoc_input_format(Extension("latex"), None) == "latex"


def test_input_format_falls_back_to_mime() -> None:
    docx_mime = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    assert pandoc_input_format(None, Mime(docx_mime)) == "docx"
    assert pandoc_input_format(Extension("bin"), Mime("text/rtf")) == "rtf"
    assert pandoc_input_format(None, Mime("application/unknown")) is None
    assert pandoc_input_format(None, None) is None


def test_build_args_omits_from_when_format_unknown(tmp_path: Path) -> None:
    source = tmp_path / "doc"

    assert build_pandoc_args(source, None) == [
        "pandoc",
        "--to",
        "plain",
        "--wrap=none",
        "--markdown-headings=atx",
        str(source),
    ]
    assert build_pandoc_args(source, "odt")[1] == "--from=odt"


@pytest.mark.asyncio
async def test_missing_pandoc_fails_before_spawn(tmp_path: Path) -> None:
    spawn = AsyncMock()

    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value=None), patch(
        "nosy.extractors.pandoc_extractor.asyncio.create_subprocess_exec", new=spawn
    ):
        with pytest.raises(ExtractorUnavailableError) as excinfo:
            await PandocExtractor().extract(tmp_path / "a.docx", Extension("docx"), None, tmp_path, LoggingProgress())

    spawn.assert_not_called()
    assert PANDOC_INSTALLATION_HINT in str(excinfo.value)


@pytest.mark.asyncio
async def test_pandoc_output_is_trimmed_and_staged(tmp_path: Path) -> None:
    calls: list[tuple[object, ...]] = []

    async def _fake_exec(*args, **kwargs):
        calls.append(args)
        assert kwargs["stdout"] is asyncio.subprocess.PIPE
        assert kwargs["stderr"] is asyncio.subprocess.PIPE
        return _DummyProc(stdout="\n  Chapter one\n\nTexte accentué.  \n".encode("utf-8"))

    source = tmp_path / "book.epub"
    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value="/usr/bin/pandoc"), patch(
        "nosy.extractors.pandoc_extractor.asyncio.create_subprocess_exec", new=AsyncMock(side_effect=_fake_exec)
    ):
        path = await PandocExtractor().extract(source, Extension("epub"), None, tmp_path, LoggingProgress())

    assert path == tmp_path / "ext"
    assert path.read_text(encoding="utf-8") == "Chapter one\n\nTexte accentué."
    assert calls == [
        ("pandoc", "--from=epub", "--to", "plain", "--wrap=none", "--markdown-headings=atx", str(source))
    ]


@pytest.mark.asyncio
async def test_nonzero_exit_fails_even_with_stdout(tmp_path: Path) -> None:
    async def _fake_exec(*args, **kwargs):
        return _DummyProc(stdout=b"partial output", stderr=b"Unknown reader", returncode=64)

    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value="/usr/bin/pandoc"), patch(
        "nosy.extractors.pandoc_extractor.asyncio.create_subprocess_exec", new=AsyncMock(side_effect=_fake_exec)
    ):
        with pytest.raises(ExtractionError, match="Unknown reader"):
            await PandocExtractor().extract(tmp_path / "x.odt", Extension("odt"), None, tmp_path, LoggingProgress())

    assert not (tmp_path / "ext").exists()


@pytest.mark.asyncio
async def test_invalid_utf8_output_fails(tmp_path: Path) -> None:
    async def _fake_exec(*args, **kwargs):
        return _DummyProc(stdout=b"\xff\xfe broken")

    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value="/usr/bin/pandoc"), patch(
        "nosy.extractors.pandoc_extractor.asyncio.create_subprocess_exec", new=AsyncMock(side_effect=_fake_exec)
    ):
        with pytest.raises(ExtractionError, match="not valid UTF-8"):
            await PandocExtractor().extract(tmp_path / "x.rtf", Extension("rtf"), None, tmp_path, LoggingProgress())


@pytest.mark.asyncio
async def test_whitespace_only_output_fails(tmp_path: Path) -> None:
    async def _fake_exec(*args, **kwargs):
        return _DummyProc(stdout=b"  \n\t\n")

    with patch("nosy.extractors.pandoc_extractor.shutil.which", return_value="/usr/bin/pandoc"), patch(
        "nosy.extractors.pandoc_extractor.asyncio.create_subprocess_exec", new=AsyncMock(side_effect=_fake_exec)
    ):
        with pytest.raises(ExtractionError, match="empty output"):
            await PandocExtractor().extract(tmp_path / "x.doc", Extension("doc"), None, tmp_path, LoggingProgress())
