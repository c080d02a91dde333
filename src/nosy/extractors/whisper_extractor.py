"""Speech-to-text extraction with PyAV decoding and whisper.cpp inference."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping

import av
import numpy as np
from pywhispercpp.model import Model

from nosy.errors import ExtractionError
from nosy.extractors.base import write_extracted_text
from nosy.extractors.whisper_settings import WhisperSettings
from nosy.pipeline.models import Extension, Mime
from nosy.pipeline.progress import ProgressSink

logger = logging.getLogger(__name__)

WHISPER_SAMPLE_RATE = 16_000
WHISPER_CHANNEL_LAYOUT = "mono"


def decode_audio_samples(path: Path) -> np.ndarray:
    """Decode the first audio stream of ``path`` to mono 16 kHz float32 PCM."""

    chunks: list[np.ndarray] = []
    try:
        with av.open(str(path)) as container:
            if not container.streams.audio:
                raise ExtractionError("input has no audio stream", extractor="whisper")
            stream = container.streams.audio[0]
            resampler = av.AudioResampler(
                format="flt",
                layout=WHISPER_CHANNEL_LAYOUT,
                rate=WHISPER_SAMPLE_RATE,
            )
            for frame in container.decode(stream):
                for resampled in resampler.resample(frame):
                    chunks.append(resampled.to_ndarray().reshape(-1))
            for resampled in resampler.resample(None):
                chunks.append(resampled.to_ndarray().reshape(-1))
    except (av.error.FFmpegError, OSError, ValueError) as exc:
        raise ExtractionError(f"failed to decode audio: {exc}", extractor="whisper") from exc

    if not chunks:
        raise ExtractionError("decoded audio is empty", extractor="whisper")
    samples = np.concatenate(chunks).astype(np.float32, copy=False)
    if samples.size == 0:
        raise ExtractionError("decoded audio is empty", extractor="whisper")
    logger.debug("Decoded %d samples from %s", samples.size, path)
    return samples


def join_segments(segments) -> str:
    lines = []
    for segment in segments:
        text = str(getattr(segment, "text", "") or "").strip()
        if text:
            lines.append(text)
    return "\n".join(lines)


def transcribe_samples(samples: np.ndarray, settings: WhisperSettings) -> str:
    """Run whisper.cpp over ``samples`` and return newline-joined segment text."""

    try:
        model = Model(
            str(settings.model_path),
            redirect_whispercpp_logs_to=None,
            n_threads=settings.n_threads,
            print_progress=False,
            print_realtime=False,
        )
        segments = model.transcribe(samples)
    except Exception as exc:
        raise ExtractionError(f"failed to run whisper transcription: {exc}", extractor="whisper") from exc
    return join_segments(segments)


class WhisperExtractor:
    """Transcribe audio or video speech to text with a local whisper model."""

    name = "whisper"

    def __init__(self, settings: WhisperSettings) -> None:
        self._settings = settings

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WhisperExtractor":
        return cls(WhisperSettings.from_env(environ))

    @property
    def model_path(self) -> Path:
        return self._settings.model_path

    async def extract(
        self,
        content_path: Path,
        extension: Extension | None,
        mime: Mime | None,
        workdir: Path,
        progress: ProgressSink,
    ) -> Path:
        progress.update("Decoding audio...")
        samples = await asyncio.to_thread(decode_audio_samples, content_path)

        progress.update("Transcribing audio with whisper...")
        text = await asyncio.to_thread(transcribe_samples, samples, self._settings)
        return await write_extracted_text(text, workdir, extractor=self.name)
