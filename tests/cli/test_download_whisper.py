from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from nosy.cli.download_whisper import (
    download_model,
    model_filename,
    model_url,
    resolve_output_path,
    whisper_model_path_hint,
)
from nosy.errors import ConfigurationError, FetchError, HttpStatusError


def test_model_url_points_at_ggml_file() -> None:
    assert model_filename("base.en") == "ggml-base.en.bin"
    assert model_url("large-v3") == "https://huggingface.co/ggerganov/whisper.cpp/resolve/main/ggml-large-v3.bin"

    with pytest.raises(ConfigurationError):
        model_filename("huge")


def test_resolve_output_path_rules(tmp_path: Path) -> None:
    existing_dir = tmp_path / "models"
    existing_dir.mkdir()
    existing_file = tmp_path / "custom-name"
    existing_file.write_bytes(b"")

    assert resolve_output_path(existing_dir, "ggml-tiny.bin") == existing_dir / "ggml-tiny.bin"
    assert resolve_output_path(existing_file, "ggml-tiny.bin") == existing_file
    assert resolve_output_path(tmp_path / "new.bin", "ggml-tiny.bin") == tmp_path / "new.bin"
    assert resolve_output_path(tmp_path / "new-dir", "ggml-tiny.bin") == tmp_path / "new-dir" / "ggml-tiny.bin"


def test_hint_exports_model_path() -> None:
    assert 'export WHISPER_MODEL_PATH="/models/ggml-tiny.bin"' in whisper_model_path_hint(Path("/models/ggml-tiny.bin"))


@pytest.mark.asyncio
async def test_download_streams_model_to_disk(tmp_path: Path) -> None:
    payload = b"\x00ggml" * 1024
    requested: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=payload)

    target = await download_model("tiny", tmp_path / "models", transport=httpx.MockTransport(_handler))

    assert target == tmp_path / "models" / "ggml-tiny.bin"
    assert target.read_bytes() == payload
    assert requested == [model_url("tiny")]


@pytest.mark.asyncio
async def test_download_refuses_to_overwrite(tmp_path: Path) -> None:
    existing = tmp_path / "ggml-tiny.bin"
    existing.write_bytes(b"old")

    with pytest.raises(ConfigurationError, match="--overwrite"):
        await download_model("tiny", existing, transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    assert existing.read_bytes() == b"old"


@pytest.mark.asyncio
async def test_download_overwrites_when_asked(tmp_path: Path) -> None:
    existing = tmp_path / "ggml-tiny.bin"
    existing.write_bytes(b"old")

    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"new"))
    await download_model("tiny", existing, overwrite=True, transport=transport)

    assert existing.read_bytes() == b"new"


@pytest.mark.asyncio
async def test_download_http_error_carries_status(tmp_path: Path) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    with pytest.raises(HttpStatusError) as excinfo:
        await download_model("tiny", tmp_path, transport=transport)

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_download_size_mismatch_fails(tmp_path: Path) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Length": "100"}, content=b"short")

    with pytest.raises(FetchError, match="size mismatch"):
        await download_model("tiny", tmp_path, transport=httpx.MockTransport(_handler))

    assert not (tmp_path / "ggml-tiny.bin").exists()
    assert not (tmp_path / "ggml-tiny.bin.part").exists()


@pytest.mark.asyncio
async def test_download_leaves_no_partial_file(tmp_path: Path) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"model"))

    target = await download_model("tiny", tmp_path, transport=transport)

    assert target.read_bytes() == b"model"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["ggml-tiny.bin"]


@pytest.mark.asyncio
async def test_failed_overwrite_keeps_existing_model(tmp_path: Path) -> None:
    existing = tmp_path / "ggml-tiny.bin"
    existing.write_bytes(b"old")

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Length": "100"}, content=b"short")

    with pytest.raises(FetchError):
        await download_model("tiny", existing, overwrite=True, transport=httpx.MockTransport(_handler))

    assert existing.read_bytes() == b"old"
    assert not (tmp_path / "ggml-tiny.bin.part").exists()
