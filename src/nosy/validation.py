"""Path checks shared by configuration loading and the command line."""

from __future__ import annotations

from pathlib import Path

from nosy.errors import ConfigurationError


def require_regular_file(path: Path) -> Path:
    """Return ``path`` when it names an existing regular file."""

    if not path.exists():
        raise ConfigurationError(f"file does not exist at {str(path)!r}")
    if not path.is_file():
        raise ConfigurationError(f"path is not a file: {str(path)!r}")
    return path


def require_absent(path: Path) -> Path:
    if path.exists():
        raise ConfigurationError(f"file already exists at {str(path)!r}")
    return path
