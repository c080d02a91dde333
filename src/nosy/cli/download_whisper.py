"""Download ggml whisper.cpp models from Hugging Face."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from rich.progress import Progress

from nosy.errors import ConfigurationError, FetchError, HttpStatusError, StagingError

logger = logging.getLogger(__name__)

WHISPER_MODELS = (
    "tiny",
    "tiny.en",
    "base",
    "base.en",
    "small",
    "small.en",
    "medium",
    "medium.en",
    "large-v1",
    "large-v2",
    "large-v3",
)
MODEL_BASE_URL = "https://huggingface.co/ggerganov/whisper.cpp/resolve/main"
CHUNK_SIZE = 1024 * 1024


def model_filename(model: str) -> str:
    if model not in WHISPER_MODELS:
        raise ConfigurationError(f"Unknown whisper model {model!r}")
    return f"ggml-{model}.bin"


def model_url(model: str) -> str:
    return f"{MODEL_BASE_URL}/{model_filename(model)}"


def resolve_output_path(path: Path, filename: str) -> Path:
    """Decide whether ``path`` names the model file or its directory.

    Existing directories and non-``.bin`` paths that do not exist yet are
    treated as directories.
    """

    if path.exists():
        return path / filename if path.is_dir() else path
    if path.suffix == ".bin":
        return path
    return path / filename


def whisper_model_path_hint(path: Path) -> str:
    return (
        "To use it with extract/summarize, we recommend running:\n"
        f'  export WHISPER_MODEL_PATH="{path}"'
    )


async def download_model(
    model: str,
    output: Path,
    *,
    overwrite: bool = False,
    progress: Progress | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Path:
    """Stream ``model`` to disk and return the written file path."""

    filename = model_filename(model)
    url = model_url(model)
    target = resolve_output_path(output, filename)

    if target.exists() and not overwrite:
        raise ConfigurationError(f"output file already exists: {str(target)!r} (use --overwrite to replace)")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StagingError(f"failed to create output directory: {exc}", path=str(target.parent)) from exc

    logger.debug("Downloading %s to %s", url, target)
    partial = target.with_name(target.name + ".part")
    downloaded = 0
    expected: int | None = None
    try:
        async with httpx.AsyncClient(follow_redirects=True, timeout=None, transport=transport) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    raise HttpStatusError("download request failed", uri=url, status_code=response.status_code)

                length = response.headers.get("Content-Length")
                expected = int(length) if length and length.isdigit() else None
                task = progress.add_task(f"Downloading {filename}", total=expected) if progress else None

                with partial.open("wb") as handle:
                    async for chunk in response.aiter_bytes(CHUNK_SIZE):
                        handle.write(chunk)
                        downloaded += len(chunk)
                        if progress is not None and task is not None:
                            progress.update(task, completed=downloaded)

        if expected is not None and downloaded != expected:
            raise FetchError(
                f"download size mismatch: expected {expected} bytes, got {downloaded} bytes",
                uri=url,
            )
        partial.replace(target)
    except httpx.HTTPError as exc:
        raise FetchError(f"failed to read download stream: {exc}", uri=url) from exc
    except OSError as exc:
        raise StagingError(f"failed to write output file: {exc}", path=str(target)) from exc
    finally:
        # Only a complete download may appear at the target path.
        partial.unlink(missing_ok=True)

    logger.info("Saved whisper model to %s", target)
    return target
