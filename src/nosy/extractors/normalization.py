"""Text decoding and whitespace helpers shared by extractor backends."""

from __future__ import annotations

import re

from charset_normalizer import from_bytes

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def detect_encoding(raw: bytes) -> str:
    """Return UTF-8 when it decodes cleanly, else the best charset guess."""

    try:
        raw.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return best.encoding

    raise ValueError("Could not detect text encoding")


def decode_text(raw: bytes) -> str:
    return raw.decode(detect_encoding(raw))
