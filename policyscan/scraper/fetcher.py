"""Bounded HTTP fetcher routed through the rendering proxy.

Both the target page and the compliance-policy document go through the same
:class:`BoundedFetcher`, so they share one size ceiling, one deadline and one
error mapping:

    size counter passes ``max_size``   → ResponseTooLarge (connection closed)
    no terminal event within timeout  → RequestTimeout
    DNS / connect / reset / 4xx / 5xx → TransportError

Sanitization is left to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from policyscan.config import Settings
from policyscan.errors import RequestTimeout, ResponseTooLarge, TransportError
from policyscan.scraper.models import FetchTarget, RawResponse

logger = logging.getLogger(__name__)

# Anything that turns a FetchTarget into text; BoundedFetcher in production,
# canned coroutines in tests.
Fetcher = Callable[[FetchTarget], Awaitable[str]]


def proxy_target(settings: Settings, target_url: str, label: str = "webpage") -> FetchTarget:
    """Return a :class:`FetchTarget` that asks the rendering proxy for *target_url*.

    The proxy takes the full target URL as its path, e.g.
    ``https://r.jina.ai/https://example.com/pricing``.  The bearer header is
    only sent when a token is configured.
    """
    base = httpx.URL(settings.proxy_base_url)
    headers: dict[str, str] = {}
    if settings.proxy_token:
        headers["Authorization"] = f"Bearer {settings.proxy_token}"

    return FetchTarget(
        host=base.netloc.decode("ascii"),
        path=f"{base.path.rstrip('/')}/{target_url}",
        headers=headers,
        timeout=settings.request_timeout,
        label=label,
        scheme=base.scheme,
    )


class BoundedFetcher:
    """One outbound GET per call, capped at *max_size* bytes.

    Args:
        max_size: Largest body accepted, in bytes.
        transport: Optional ``httpx`` transport, for tests.
    """

    def __init__(
        self,
        max_size: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.max_size = max_size
        self._transport = transport

    async def __call__(self, target: FetchTarget) -> str:
        logger.info("Fetching %s content from %s", target.label, target.url)
        try:
            text = await asyncio.wait_for(self._fetch(target), timeout=target.timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out after %ss fetching %s", target.timeout, target.url)
            raise RequestTimeout(target.timeout, target.label) from None
        except httpx.TimeoutException as exc:
            logger.warning("Timed out fetching %s: %s", target.url, exc)
            raise RequestTimeout(target.timeout, target.label) from exc
        except ResponseTooLarge:
            logger.warning(
                "Aborted %s: body exceeds %d bytes", target.url, self.max_size
            )
            raise
        except httpx.HTTPError as exc:
            detail = str(exc) or type(exc).__name__
            logger.warning("Transport error fetching %s: %s", target.url, detail)
            raise TransportError(target.label, detail) from exc

        logger.info("Fetched %d characters of %s content", len(text), target.label)
        return text

    async def _fetch(self, target: FetchTarget) -> str:
        raw = RawResponse(limit=self.max_size, label=target.label)

        async with httpx.AsyncClient(
            timeout=target.timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            # Leaving the stream context closes the connection, which is how
            # a size abort stops the upstream from sending anything more.
            async with client.stream("GET", target.url, headers=dict(target.headers)) as response:
                response.raise_for_status()

                declared = response.headers.get("content-length", "")
                if declared.isdigit() and int(declared) > self.max_size:
                    raise ResponseTooLarge(target.label, self.max_size)

                async for chunk in response.aiter_bytes():
                    raw.append(chunk)
                encoding = response.charset_encoding

        return raw.text(encoding)
