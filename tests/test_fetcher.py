"""Tests for the bounded fetcher.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer for the simple
  request/response cases.
- ``httpx.MockTransport`` is injected directly where a test needs control
  over how the body is streamed or how long the upstream takes.
"""

from __future__ import annotations

import asyncio
import dataclasses

import httpx
import pytest
import respx

from policyscan.config import Settings
from policyscan.errors import RequestTimeout, ResponseTooLarge, TransportError
from policyscan.scraper.fetcher import BoundedFetcher, proxy_target
from policyscan.scraper.models import FetchTarget, RawResponse


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_PROXY_URL = "https://r.jina.ai/https://example.com/pricing"


def _target(timeout: float = 5.0, label: str = "webpage") -> FetchTarget:
    return FetchTarget(
        host="r.jina.ai",
        path="/https://example.com/pricing",
        headers={"Authorization": "Bearer test-token"},
        timeout=timeout,
        label=label,
    )


def _settings(**overrides) -> Settings:
    values = {
        "proxy_base_url": "https://r.jina.ai",
        "proxy_token": "test-token",
        "request_timeout": 12.0,
        "max_response_size": 1024,
    }
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestFetchTarget:
    def test_url_joins_scheme_host_and_path(self) -> None:
        assert _target().url == _PROXY_URL

    def test_is_immutable(self) -> None:
        target = _target()
        with pytest.raises(dataclasses.FrozenInstanceError):
            target.host = "elsewhere.example"  # type: ignore[misc]

    def test_headers_are_read_only(self) -> None:
        target = _target()
        with pytest.raises(TypeError):
            target.headers["X-Extra"] = "1"  # type: ignore[index]


class TestRawResponse:
    def test_accumulates_until_limit(self) -> None:
        raw = RawResponse(limit=8)
        raw.append(b"abcd")
        raw.append(b"efgh")
        assert raw.size == 8
        assert raw.text() == "abcdefgh"

    def test_crossing_limit_raises_and_discards(self) -> None:
        raw = RawResponse(limit=5, label="compliance policies")
        raw.append(b"abcd")
        with pytest.raises(ResponseTooLarge) as exc_info:
            raw.append(b"ef")
        assert raw.chunks == []
        assert "compliance policies" in exc_info.value.message

    def test_unknown_charset_falls_back_to_utf8(self) -> None:
        raw = RawResponse(limit=100)
        raw.append("café".encode("utf-8"))
        assert raw.text("no-such-charset") == "café"


class TestProxyTarget:
    def test_routes_target_url_through_proxy(self) -> None:
        target = proxy_target(_settings(), "https://example.com/pricing")
        assert target.url == _PROXY_URL
        assert target.headers["Authorization"] == "Bearer test-token"
        assert target.timeout == 12.0
        assert target.label == "webpage"

    def test_no_token_means_no_authorization_header(self) -> None:
        target = proxy_target(_settings(proxy_token=""), "https://example.com/")
        assert "Authorization" not in target.headers

    def test_label_is_carried(self) -> None:
        target = proxy_target(_settings(), "https://policy.example/doc", label="compliance policies")
        assert target.label == "compliance policies"
        assert target.path == "/https://policy.example/doc"

    def test_proxy_base_with_port_and_prefix(self) -> None:
        settings = _settings(proxy_base_url="http://localhost:9000/render/")
        target = proxy_target(settings, "https://example.com/")
        assert target.url == "http://localhost:9000/render/https://example.com/"


# ---------------------------------------------------------------------------
# BoundedFetcher
# ---------------------------------------------------------------------------

class TestBoundedFetcher:
    async def test_returns_body_text(self) -> None:
        with respx.mock:
            route = respx.get(_PROXY_URL).mock(
                return_value=httpx.Response(200, text="<p>Hello</p>")
            )
            text = await BoundedFetcher(1024)(_target())

        assert text == "<p>Hello</p>"
        assert route.call_count == 1

    async def test_sends_target_headers(self) -> None:
        with respx.mock:
            route = respx.get(_PROXY_URL).mock(return_value=httpx.Response(200, text="ok"))
            await BoundedFetcher(1024)(_target())

        assert route.calls.last.request.headers["Authorization"] == "Bearer test-token"

    async def test_body_exactly_at_limit_is_accepted(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(return_value=httpx.Response(200, content=b"x" * 16))
            text = await BoundedFetcher(16)(_target())

        assert text == "x" * 16

    async def test_declared_length_over_limit_raises(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(return_value=httpx.Response(200, content=b"x" * 100))
            with pytest.raises(ResponseTooLarge) as exc_info:
                await BoundedFetcher(10)(_target())

        assert exc_info.value.status_code == 413

    async def test_streamed_body_aborts_at_ceiling(self) -> None:
        """No Content-Length: the running counter stops the stream."""
        sent: list[int] = []

        async def body():
            for _ in range(100):
                sent.append(4)
                yield b"abcd"

        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body()))
        fetcher = BoundedFetcher(10, transport=transport)

        with pytest.raises(ResponseTooLarge):
            await fetcher(_target())

        # 4 + 4 + 4 crosses 10 on the third chunk; nothing is read after that.
        assert len(sent) == 3

    async def test_slow_upstream_times_out(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, text="too late")

        fetcher = BoundedFetcher(1024, transport=httpx.MockTransport(handler))

        with pytest.raises(RequestTimeout) as exc_info:
            await fetcher(_target(timeout=0.05))

        assert exc_info.value.status_code == 504

    async def test_httpx_timeout_maps_to_request_timeout(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(side_effect=httpx.ReadTimeout("read timed out"))
            with pytest.raises(RequestTimeout) as exc_info:
                await BoundedFetcher(1024)(_target(timeout=30.0))

        assert exc_info.value.message == "Request exceeded 30 seconds timeout limit"

    async def test_connection_error_maps_to_transport_error(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
            with pytest.raises(TransportError) as exc_info:
                await BoundedFetcher(1024)(_target(label="compliance policies"))

        assert exc_info.value.details == "Connection refused"
        assert exc_info.value.message == (
            "Could not retrieve the compliance policies content: Connection refused"
        )
        assert exc_info.value.error == "Failed to fetch compliance policies content"
        assert exc_info.value.status_code == 500

    async def test_upstream_error_status_maps_to_transport_error(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(return_value=httpx.Response(502, text="bad gateway"))
            with pytest.raises(TransportError) as exc_info:
                await BoundedFetcher(1024)(_target())

        assert "502" in exc_info.value.details

    async def test_decodes_with_response_charset(self) -> None:
        with respx.mock:
            respx.get(_PROXY_URL).mock(
                return_value=httpx.Response(
                    200,
                    content="café".encode("latin-1"),
                    headers={"Content-Type": "text/plain; charset=latin-1"},
                )
            )
            text = await BoundedFetcher(1024)(_target())

        assert text == "café"

    async def test_one_request_per_call(self) -> None:
        with respx.mock:
            route = respx.get(_PROXY_URL).mock(return_value=httpx.Response(503))
            with pytest.raises(TransportError):
                await BoundedFetcher(1024)(_target())

        assert route.call_count == 1
