from __future__ import annotations

import asyncio

import httpx
import pytest

from tools.aviation_client import AviationAPIError, AviationReferenceClient
from tools.retry import RetryPolicy

NO_WAIT = RetryPolicy(max_attempts=3, initial_delay_seconds=0.0, max_delay_seconds=0.0, retry_on=(httpx.TransportError, AviationAPIError))


def _client(handler) -> AviationReferenceClient:
    return AviationReferenceClient(
        base_url="https://aviation.test/v1",
        api_key="secret",
        timeout_seconds=2,
        retry_policy=NO_WAIT,
        transport=httpx.MockTransport(handler),
    )


def test_bundled_data_served_without_base_url():
    async def _run():
        client = AviationReferenceClient(base_url="", api_key="")
        assert not client.remote_enabled()
        airports = await client.fetch_airports()
        assert any(a.iata == "LHR" and a.country == "GB" for a in airports)
        airlines = await client.fetch_airlines()
        assert any(a.iata == "LH" and a.country == "DE" for a in airlines)

    asyncio.run(_run())


def test_remote_rows_are_parsed():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/airports"):
            return httpx.Response(
                200,
                json={"data": [{"iata_code": "lhr", "name": "Heathrow", "country_iso2": "GB", "timezone": "Europe/London"}]},
            )
        return httpx.Response(200, json=[{"iata": "BA", "name": "British Airways", "country": "GB"}])

    async def _run():
        client = _client(handler)
        airports = await client.fetch_airports()
        airlines = await client.fetch_airlines()
        assert [(a.iata, a.country, a.name) for a in airports] == [("LHR", "GB", "Heathrow")]
        assert [(a.iata, a.country) for a in airlines] == [("BA", "GB")]

    asyncio.run(_run())
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert str(seen[0].url) == "https://aviation.test/v1/airports"


def test_transient_errors_are_retried():
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            return httpx.Response(503, json={"error": "busy"})
        return httpx.Response(200, json={"data": [{"iata": "AF", "name": "Air France", "country": "FR"}]})

    async def _run():
        airlines = await _client(handler).fetch_airlines()
        assert airlines[0].country == "FR"

    asyncio.run(_run())
    assert attempts == 3


def test_persistent_failure_raises_after_max_attempts():
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        return httpx.Response(500, text="boom")

    async def _run():
        with pytest.raises(AviationAPIError, match="aviation_api_500"):
            await _client(handler).fetch_airports()

    asyncio.run(_run())
    assert attempts == 3


def test_unexpected_payloads_raise():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"not": "a list"}})

    async def _run():
        with pytest.raises(AviationAPIError, match="unexpected_payload"):
            await _client(handler).fetch_airports()

    asyncio.run(_run())


def test_bad_json_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})

    async def _run():
        with pytest.raises(AviationAPIError, match="bad_json"):
            await _client(handler).fetch_airlines()

    asyncio.run(_run())
