"""Fetcher implementations and scheme-based selection."""

from __future__ import annotations

from nosy.errors import SchemeUnsupportedError
from nosy.fetchers.base import Fetcher
from nosy.fetchers.http_fetcher import HttpFetcher, HttpFetcherOptions, HttpFetchMode
from nosy.pipeline.models import Scheme


def build_fetcher(scheme: Scheme, options: HttpFetcherOptions | None = None) -> Fetcher:
    """Return the fetcher for a scheme that needs network retrieval."""

    if scheme is Scheme.HTTP:
        return HttpFetcher(options)
    raise SchemeUnsupportedError("No fetcher for input scheme", scheme=scheme.value)


__all__ = [
    "Fetcher",
    "HttpFetchMode",
    "HttpFetcher",
    "HttpFetcherOptions",
    "build_fetcher",
]
