"""Shared fetcher contract for scheme-specific retrieval backends."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from nosy.pipeline.progress import ProgressSink


@runtime_checkable
class Fetcher(Protocol):
    """Protocol that every fetch backend must implement."""

    async def fetch(self, uri: str, workdir: Path, progress: ProgressSink) -> Path:
        """Retrieve ``uri`` and return the path of the staged raw artifact."""
