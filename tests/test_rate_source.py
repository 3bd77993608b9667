"""Tests for the DolarAPI rate source, served through ``httpx.MockTransport``."""

import httpx
import pytest

from mipana.domain.pricing import RateSourceUnavailable
from mipana.infrastructure.rate_source import (
    DOLARAPI_OFFICIAL_URL,
    DolarApiRateSource,
    parse_rate,
)


def _source(handler) -> DolarApiRateSource:
    return DolarApiRateSource(transport=httpx.MockTransport(handler))


class TestParseRate:
    def test_prefers_promedio(self):
        assert parse_rate({"promedio": 36.5, "venta": 36.9}) == 36.5

    def test_falls_back_to_venta(self):
        assert parse_rate({"promedio": None, "venta": 36.9}) == 36.9

    def test_numeric_string(self):
        assert parse_rate({"promedio": "36.71"}) == 36.71

    def test_infinite_promedio_skipped(self):
        assert parse_rate({"promedio": float("inf"), "venta": 36.9}) == 36.9

    def test_non_positive_promedio_skipped(self):
        assert parse_rate({"promedio": 0, "venta": 36.9}) == 36.9

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"promedio": None, "venta": None},
            {"promedio": "n/a"},
            {"venta": -1},
            {"promedio": True},
            {"promedio": float("inf")},
            {"promedio": float("nan")},
            [36.5],
            "36.5",
        ],
    )
    def test_unusable_payloads(self, payload):
        with pytest.raises(RateSourceUnavailable):
            parse_rate(payload)


class TestDolarApiRateSource:
    @pytest.mark.asyncio
    async def test_fetches_official_endpoint(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(
                200,
                json={
                    "fuente": "oficial",
                    "nombre": "Oficial",
                    "compra": None,
                    "venta": None,
                    "promedio": 36.52,
                    "fechaActualizacion": "2026-03-15T12:00:00.000Z",
                },
            )

        assert await _source(handler).fetch_rate() == 36.52
        assert seen == [DOLARAPI_OFFICIAL_URL]

    @pytest.mark.asyncio
    async def test_venta_when_promedio_missing(self):
        source = _source(lambda request: httpx.Response(200, json={"venta": 37.1}))
        assert await source.fetch_rate() == 37.1

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        source = _source(lambda request: httpx.Response(503))
        with pytest.raises(RateSourceUnavailable, match="503"):
            await source.fetch_rate()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        source = _source(lambda request: httpx.Response(200, text="<html>down</html>"))
        with pytest.raises(RateSourceUnavailable):
            await source.fetch_rate()

    @pytest.mark.asyncio
    async def test_missing_fields(self):
        source = _source(lambda request: httpx.Response(200, json={"fuente": "oficial"}))
        with pytest.raises(RateSourceUnavailable):
            await source.fetch_rate()

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(RateSourceUnavailable, match="ReadTimeout"):
            await _source(handler).fetch_rate()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route to host", request=request)

        with pytest.raises(RateSourceUnavailable):
            await _source(handler).fetch_rate()

    @pytest.mark.asyncio
    async def test_infinity_in_body(self):
        source = _source(
            lambda request: httpx.Response(
                200,
                text='{"promedio": Infinity}',
                headers={"content-type": "application/json"},
            )
        )
        with pytest.raises(RateSourceUnavailable):
            await source.fetch_rate()
