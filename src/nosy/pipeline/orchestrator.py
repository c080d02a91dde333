"""Fetch, classify, extract and deliver one input per run."""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Callable, Iterator, Mapping, Protocol, runtime_checkable
import uuid

from nosy.errors import (
    ClassificationError,
    FetchError,
    NosyError,
    PipelineStageError,
    SchemeUnsupportedError,
    StagingError,
    SummarizationError,
)
from nosy.extractors import build_extractor
from nosy.extractors.base import Extractor
from nosy.extractors.normalization import decode_text
from nosy.fetchers import build_fetcher
from nosy.fetchers.base import Fetcher
from nosy.fetchers.http_fetcher import HttpFetcherOptions
from nosy.pipeline.file_type import classify
from nosy.pipeline.models import (
    Classification,
    ExtractorKind,
    InputDescriptor,
    Mode,
    PipelineRequest,
    PipelineResult,
    Scheme,
    WorkDir,
)
from nosy.pipeline.progress import NullProgress, ProgressSink
from nosy.pipeline.scheme import describe_input, local_path_for, scheme_prefix

logger = logging.getLogger(__name__)

STAGE_SCHEME = "scheme"
STAGE_FETCH = "fetch"
STAGE_CLASSIFY = "classify"
STAGE_EXTRACT = "extract"
STAGE_OUTPUT = "output"
STAGE_SUMMARIZE = "summarize"

UNSUPPORTED_KIND_HINT = (
    "Extractor detection is heuristic and may be wrong. "
    "Try specifying one explicitly via --ext-kind."
)


@runtime_checkable
class Summarizer(Protocol):
    """Turns extracted text into a summary."""

    async def summarize(self, text: str, progress: ProgressSink) -> str:
        """Return the summary for ``text``."""


def default_workdir() -> Path:
    """Fresh per-run location under the system temporary directory."""

    return Path(tempfile.gettempdir()) / "nosy" / str(uuid.uuid4())


@contextmanager
def _stage(name: str, completed: list[str]) -> Iterator[None]:
    try:
        yield
    except PipelineStageError:
        raise
    except (NosyError, OSError) as exc:
        logger.debug("Stage %s failed: %s", name, exc)
        raise PipelineStageError(str(exc), stage=name) from exc
    completed.append(name)


class ContentPipeline:
    """Sequence the stages of one run and stop at the first failure."""

    def __init__(
        self,
        *,
        fetch_options: HttpFetcherOptions | None = None,
        summarizer: Summarizer | None = None,
        progress: ProgressSink | None = None,
        environ: Mapping[str, str] | None = None,
        fetcher_factory: Callable[[Scheme, HttpFetcherOptions | None], Fetcher] = build_fetcher,
        extractor_factory: Callable[..., Extractor] = build_extractor,
    ) -> None:
        self._fetch_options = fetch_options
        self._summarizer = summarizer
        self._progress = progress or NullProgress()
        self._environ = environ
        self._fetcher_factory = fetcher_factory
        self._extractor_factory = extractor_factory

    async def run(self, request: PipelineRequest) -> PipelineResult:
        stages: list[str] = []
        workdir = WorkDir(request.workdir or default_workdir())

        with _stage(STAGE_SCHEME, stages):
            descriptor = describe_input(request.input)
            logger.debug("Detected scheme: %s", descriptor.scheme.value)
            if descriptor.scheme is Scheme.UNSUPPORTED:
                raise SchemeUnsupportedError(
                    f"Unsupported input scheme in {request.input!r}",
                    scheme=scheme_prefix(request.input),
                )

        with _stage(STAGE_FETCH, stages):
            raw_path = await self._fetch(descriptor, workdir)
        logger.debug("Raw content path: %s", raw_path)

        with _stage(STAGE_CLASSIFY, stages):
            classification = classify(raw_path, request.forced_kind)
        logger.info(
            "Use '%s' extractor for %s",
            classification.kind.value,
            classification.describe(),
        )

        with _stage(STAGE_EXTRACT, stages):
            extracted_path = await self._extract(raw_path, classification, workdir)
        logger.debug("Extracted content path: %s", extracted_path)

        if request.mode is Mode.EXTRACT:
            with _stage(STAGE_OUTPUT, stages):
                await asyncio.to_thread(_copy_out, extracted_path, request.output)
            logger.debug("Wrote extracted content to output path: %s", request.output)
        else:
            with _stage(STAGE_SUMMARIZE, stages):
                summary = await self._summarize(extracted_path)
            logger.debug("Received summary: chars=%d", len(summary))
            with _stage(STAGE_OUTPUT, stages):
                await asyncio.to_thread(_write_out, summary, request.output)
            logger.debug("Wrote summary to output path: %s", request.output)

        return PipelineResult(
            input=descriptor,
            raw_path=raw_path,
            classification=classification,
            extracted_path=extracted_path,
            output_path=request.output,
            workdir=workdir.path,
            workdir_created=workdir.created,
            stages=stages,
        )

    async def _fetch(self, descriptor: InputDescriptor, workdir: WorkDir) -> Path:
        if descriptor.scheme is Scheme.FILE:
            path = local_path_for(descriptor.raw)
            if not path.is_file():
                raise FetchError("Input file does not exist or is not a regular file", uri=descriptor.raw)
            return path

        fetcher = self._fetcher_factory(descriptor.scheme, self._fetch_options)
        workdir.ensure()
        logger.info("Using workdir: %s", workdir.path)
        return await fetcher.fetch(descriptor.raw, workdir.path, self._progress)

    async def _extract(self, raw_path: Path, classification: Classification, workdir: WorkDir) -> Path:
        kind = classification.kind
        if kind is ExtractorKind.PLAIN_TEXT:
            return raw_path
        if kind is ExtractorKind.UNSUPPORTED:
            extension = classification.extension.value if classification.extension else "none"
            mime = classification.mime.value if classification.mime else "none"
            raise ClassificationError(
                f"unsupported extractor kind for ext/mime: {extension}/{mime}. {UNSUPPORTED_KIND_HINT}",
                extension=extension,
                mime=mime,
            )

        extractor = self._extractor_factory(kind, environ=self._environ)
        workdir.ensure()
        return await extractor.extract(
            raw_path,
            classification.extension,
            classification.mime,
            workdir.path,
            self._progress,
        )

    async def _summarize(self, extracted_path: Path) -> str:
        if self._summarizer is None:
            raise SummarizationError("No summarizer configured for summarize mode")

        try:
            raw = await asyncio.to_thread(extracted_path.read_bytes)
        except OSError as exc:
            raise StagingError(f"Failed to read extracted content: {exc}", path=str(extracted_path)) from exc
        try:
            text = decode_text(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise StagingError(f"Extracted content could not be decoded: {exc}", path=str(extracted_path)) from exc
        return await self._summarizer.summarize(text, self._progress)


def _ensure_parent(path: Path) -> None:
    parent = path.parent
    if str(parent) not in ("", os.curdir):
        parent.mkdir(parents=True, exist_ok=True)


def _copy_out(source: Path, target: Path) -> None:
    try:
        _ensure_parent(target)
        shutil.copyfile(source, target)
    except OSError as exc:
        raise StagingError(f"Failed to write extracted content to output path: {exc}", path=str(target)) from exc


def _write_out(text: str, target: Path) -> None:
    try:
        _ensure_parent(target)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise StagingError(f"Failed to write summary to output path: {exc}", path=str(target)) from exc
