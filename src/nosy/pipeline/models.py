"""Canonical value types shared by the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nosy.errors import StagingError


RAW_CONTENT_FILENAME = "raw"
EXTRACTED_CONTENT_FILENAME = "ext"


class Scheme(Enum):
    FILE = "file"
    HTTP = "http"
    UNSUPPORTED = "unsupported"


class ExtractorKind(Enum):
    PLAIN_TEXT = "plain"
    HTML_NATIVE = "html"
    PDF_NATIVE = "pdf"
    PANDOC = "pandoc"
    WHISPER = "whisper"
    UNSUPPORTED = "unsupported"

    @classmethod
    def selectable(cls) -> list["ExtractorKind"]:
        """Kinds a caller may force explicitly from the command line."""

        return [kind for kind in cls if kind is not cls.UNSUPPORTED]


class Mode(Enum):
    SUMMARIZE = "summarize"
    EXTRACT = "extract"


@dataclass(frozen=True, slots=True)
class Extension:
    """Lower-cased file extension without the leading dot."""

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.value.strip().lstrip(".").lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Mime:
    """Lower-cased MIME essence (type/subtype, parameters dropped)."""

    value: str

    def __post_init__(self) -> None:
        essence = self.value.split(";", 1)[0]
        object.__setattr__(self, "value", essence.strip().lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class InputDescriptor:
    """Raw input string paired with the scheme detected for it."""

    raw: str
    scheme: Scheme


@dataclass(frozen=True, slots=True)
class Classification:
    """Extractor kind chosen for an artifact and the evidence behind it."""

    kind: ExtractorKind
    extension: Extension | None = None
    mime: Mime | None = None
    forced: bool = False

    def describe(self) -> str:
        extension = self.extension.value if self.extension else "none"
        mime = self.mime.value if self.mime else "none"
        return f"extension={extension}, mime={mime}"


class WorkDir:
    """Per-run staging directory, created on first use and never shared."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._created = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def created(self) -> bool:
        return self._created

    @property
    def raw_path(self) -> Path:
        return self._path / RAW_CONTENT_FILENAME

    @property
    def extracted_path(self) -> Path:
        return self._path / EXTRACTED_CONTENT_FILENAME

    def ensure(self) -> Path:
        """Create the directory once and return its path."""

        if self._created:
            return self._path
        try:
            self._path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(f"Failed to create work directory: {exc}", path=str(self._path)) from exc
        self._created = True
        return self._path


@dataclass(slots=True)
class PipelineRequest:
    """Everything one pipeline run needs from its caller."""

    input: str
    output: Path
    mode: Mode = Mode.SUMMARIZE
    workdir: Path | None = None
    forced_kind: ExtractorKind | None = None


@dataclass(slots=True)
class PipelineResult:
    """Artifacts and decisions produced by a completed run."""

    input: InputDescriptor
    raw_path: Path
    classification: Classification
    extracted_path: Path
    output_path: Path
    workdir: Path
    workdir_created: bool = False
    stages: list[str] = field(default_factory=list)
