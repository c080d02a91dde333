"""Input scheme detection: decides how an input string is retrieved."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from nosy.pipeline.models import InputDescriptor, Scheme

_SCHEME_SEPARATOR = "://"
_HTTP_SCHEMES = {"http", "https"}


def detect_scheme(raw: str) -> Scheme:
    """Classify ``raw`` by its URI prefix without touching the filesystem."""

    if _SCHEME_SEPARATOR not in raw:
        return Scheme.FILE

    prefix, _rest = raw.split(_SCHEME_SEPARATOR, 1)
    prefix = prefix.lower()
    if prefix in _HTTP_SCHEMES:
        return Scheme.HTTP
    if prefix == "file":
        return Scheme.FILE
    return Scheme.UNSUPPORTED


def describe_input(raw: str) -> InputDescriptor:
    return InputDescriptor(raw=raw, scheme=detect_scheme(raw))


def scheme_prefix(raw: str) -> str:
    """Return the lower-cased text before ``://``, or an empty string."""

    if _SCHEME_SEPARATOR not in raw:
        return ""
    return raw.split(_SCHEME_SEPARATOR, 1)[0].lower()


def local_path_for(raw: str) -> Path:
    """Map a FILE-scheme input to a filesystem path.

    Bare paths come back unchanged; ``file://`` URIs are decoded.
    """

    if scheme_prefix(raw) != "file":
        return Path(raw)

    parsed = urlparse(raw)
    if parsed.netloc and parsed.netloc != "localhost":
        # file://dir/name.txt: the authority is the first path segment
        return Path(unquote(parsed.netloc + parsed.path))
    return Path(url2pathname(parsed.path))
