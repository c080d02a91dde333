"""Pipeline value types, classification and progress reporting."""

from .models import (
    EXTRACTED_CONTENT_FILENAME,
    RAW_CONTENT_FILENAME,
    Classification,
    Extension,
    ExtractorKind,
    InputDescriptor,
    Mime,
    Mode,
    PipelineRequest,
    PipelineResult,
    Scheme,
    WorkDir,
)
from .progress import LoggingProgress, NullProgress, ProgressSink

__all__ = [
    "EXTRACTED_CONTENT_FILENAME",
    "RAW_CONTENT_FILENAME",
    "Classification",
    "Extension",
    "ExtractorKind",
    "InputDescriptor",
    "LoggingProgress",
    "Mime",
    "Mode",
    "NullProgress",
    "PipelineRequest",
    "PipelineResult",
    "ProgressSink",
    "Scheme",
    "WorkDir",
]
