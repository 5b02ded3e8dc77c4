"""Scraper package — bounded fetch through the rendering proxy & sanitization."""

from policyscan.scraper.fetcher import BoundedFetcher, Fetcher, proxy_target
from policyscan.scraper.models import FetchTarget, RawResponse
from policyscan.scraper.sanitizer import sanitize

__all__ = [
    "BoundedFetcher",
    "Fetcher",
    "FetchTarget",
    "RawResponse",
    "proxy_target",
    "sanitize",
]
