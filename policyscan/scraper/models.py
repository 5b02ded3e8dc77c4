"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from policyscan.errors import ResponseTooLarge


@dataclass(frozen=True)
class FetchTarget:
    """Where one bounded fetch goes and how long it may take.

    ``timeout`` is in seconds.  ``label`` names the content being fetched
    (``"webpage"``, ``"compliance policies"``) and only shows up in error
    messages.
    """

    host: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 30.0
    label: str = "webpage"
    scheme: str = "https"

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


@dataclass
class RawResponse:
    """Body chunks accumulated so far, with a running byte count.

    :meth:`append` raises :class:`~policyscan.errors.ResponseTooLarge` as soon
    as the count passes *limit*; the chunks collected up to that point are
    dropped so nothing partial can leak to a caller.
    """

    limit: int
    label: str = "webpage"
    size: int = 0
    chunks: list[bytes] = field(default_factory=list)

    def append(self, chunk: bytes) -> None:
        self.size += len(chunk)
        if self.size > self.limit:
            self.chunks.clear()
            raise ResponseTooLarge(self.label, self.limit)
        self.chunks.append(chunk)

    def text(self, encoding: str | None = None) -> str:
        """Decode the body, falling back to UTF-8 for unknown charsets."""
        body = b"".join(self.chunks)
        try:
            return body.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")
