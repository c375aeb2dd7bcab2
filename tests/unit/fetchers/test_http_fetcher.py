"""Tests for the HTTP fetcher retry policy."""

import httpx
import pytest

from motosense.exceptions import SyncFetchError
from motosense.fetchers import FixtureFetcher, HttpFetcher, decode_payload

URL = "https://example.test/schedule"


def make_fetcher(responses, max_retries=3):
    """Fetcher whose transport replays ``responses`` and records sleeps."""
    calls = []
    sleeps = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        outcome = responses[min(len(calls), len(responses)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    fetcher = HttpFetcher(client=client, max_retries=max_retries, retry_delay=1.0, sleep=fake_sleep)
    return fetcher, calls, sleeps


class TestHttpFetcher:
    """Tests for HttpFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_success(self):
        fetcher, calls, sleeps = make_fetcher([httpx.Response(200, text="[]")])

        assert await fetcher.fetch(URL) == "[]"
        assert len(calls) == 1
        assert sleeps == []
        assert calls[0].headers["User-Agent"].startswith("MotoSense/1.0")

    @pytest.mark.asyncio
    async def test_retries_server_errors_with_backoff(self):
        fetcher, calls, sleeps = make_fetcher([
            httpx.Response(503),
            httpx.Response(500),
            httpx.Response(200, text="ok"),
        ])

        assert await fetcher.fetch(URL) == "ok"
        assert len(calls) == 3
        assert sleeps == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_retries_429(self):
        fetcher, calls, _ = make_fetcher([httpx.Response(429), httpx.Response(200, text="ok")])

        assert await fetcher.fetch(URL) == "ok"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        fetcher, calls, sleeps = make_fetcher([httpx.Response(404)])

        with pytest.raises(SyncFetchError) as exc:
            await fetcher.fetch(URL)

        assert len(calls) == 1
        assert sleeps == []
        assert exc.value.attempts == 1
        assert "404" in exc.value.reason

    @pytest.mark.asyncio
    async def test_timeouts_exhaust_retries(self):
        fetcher, calls, sleeps = make_fetcher([httpx.ReadTimeout("slow")])

        with pytest.raises(SyncFetchError) as exc:
            await fetcher.fetch(URL)

        assert len(calls) == 3
        assert sleeps == [1.0, 2.0]
        assert exc.value.attempts == 3
        assert "timed out" in exc.value.reason

    @pytest.mark.asyncio
    async def test_transport_error_then_success(self):
        fetcher, calls, _ = make_fetcher([httpx.ConnectError("refused"), httpx.Response(200, text="ok")])

        assert await fetcher.fetch(URL) == "ok"
        assert len(calls) == 2


class TestFixtureFetcher:
    @pytest.mark.asyncio
    async def test_serves_json_payloads(self):
        fetcher = FixtureFetcher({URL: [{"id": "x"}]})

        assert decode_payload(await fetcher.fetch(URL)) == [{"id": "x"}]
        assert decode_payload(await fetcher.fetch("https://example.test/unknown")) == []

    @pytest.mark.asyncio
    async def test_same_payload_same_text(self):
        fetcher = FixtureFetcher()

        assert await fetcher.fetch(URL) == await fetcher.fetch(URL)
