"""Domain errors raised by pipeline stages and their collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class NosyError(Exception):
    """Base class for every error the pipeline knows how to report."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class SchemeUnsupportedError(NosyError):
    """Input uses a URI scheme no fetcher handles."""

    scheme: str = ""

    def __str__(self) -> str:
        return f"{self.message} (scheme={self.scheme or 'unknown'})"


@dataclass(slots=True)
class FetchError(NosyError):
    """Transport or I/O failure while retrieving an input."""

    uri: str = ""

    def __str__(self) -> str:
        return f"{self.message} (uri={self.uri})"


@dataclass(slots=True)
class HttpStatusError(FetchError):
    """Remote answered, but with a non-success status."""

    status_code: int = 0

    def __str__(self) -> str:
        return f"{self.message} (uri={self.uri}, status={self.status_code})"


@dataclass(slots=True)
class ClassificationError(NosyError):
    """No extractor kind matched the detected extension or MIME type."""

    extension: str | None = None
    mime: str | None = None


@dataclass(slots=True)
class ExtractorUnavailableError(NosyError):
    """A backend's external tool or library is not installed."""

    tool: str = ""
    hint: str | None = None

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}. {self.hint}"
        return self.message


@dataclass(slots=True)
class ExtractionError(NosyError):
    """Backend ran but could not produce usable text."""

    extractor: str = ""

    def __str__(self) -> str:
        return f"{self.message} (extractor={self.extractor})"


@dataclass(slots=True)
class StagingError(NosyError):
    """Work directory or staged file operation failed."""

    path: str = ""

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class ConfigurationError(NosyError):
    """Environment or user supplied configuration is invalid."""


@dataclass(slots=True)
class SummarizationError(NosyError):
    """LLM request failed or returned no usable text."""

    model: str = ""

    def __str__(self) -> str:
        return f"{self.message} (model={self.model})"


@dataclass(slots=True)
class PipelineStageError(NosyError):
    """Wraps the first failure of a run with the stage that produced it."""

    stage: str = ""

    def __str__(self) -> str:
        return f"{self.stage} stage failed: {self.message}"


def describe_error_chain(exc: BaseException) -> str:
    """Render an exception and its causes as one line, outermost first."""

    parts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        if not parts or text not in parts[-1]:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
