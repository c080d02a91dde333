from __future__ import annotations

from nosy.errors import (
    ExtractionError,
    ExtractorUnavailableError,
    FetchError,
    PipelineStageError,
    describe_error_chain,
)


def test_stage_error_names_stage() -> None:
    error = PipelineStageError("pandoc failed", stage="extract")

    assert str(error) == "extract stage failed: pandoc failed"


def test_unavailable_error_appends_hint() -> None:
    error = ExtractorUnavailableError("pandoc is not installed", tool="pandoc", hint="Install it.")

    assert str(error) == "pandoc is not installed. Install it."


def test_error_chain_is_rendered_outermost_first() -> None:
    try:
        try:
            try:
                raise OSError("connection reset")
            except OSError as exc:
                raise FetchError("Failed to send GET request", uri="https://x") from exc
        except FetchError as exc:
            raise PipelineStageError(str(exc), stage="fetch") from exc
    except PipelineStageError as exc:
        rendered = describe_error_chain(exc)

    assert rendered == "fetch stage failed: Failed to send GET request (uri=https://x): connection reset"


def test_error_chain_without_cause() -> None:
    assert describe_error_chain(ExtractionError("empty", extractor="pdf")) == "empty (extractor=pdf)"
