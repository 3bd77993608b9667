"""
DolarAPI rate source
====================

Fetches the official BCV Bs/USD rate from DolarAPI.  The endpoint answers
with a JSON object; ``promedio`` (average) is preferred and ``venta`` (sell)
is used when the average is missing.  Every failure mode -- network error,
timeout, non-2xx status, non-JSON body, missing or non-numeric fields -- is
reported as ``RateSourceUnavailable`` so the fare engine can fall back to the
configured rate.

Caching is not done here; ``RateCache`` in the pricing module owns it.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import httpx

from mipana.domain.pricing import RateSourceUnavailable

logger = logging.getLogger(__name__)

DOLARAPI_OFFICIAL_URL = "https://ve.dolarapi.com/v1/dolares/oficial"
RATE_FIELDS = ("promedio", "venta")


def parse_rate(data: Any) -> float:
    """Extract a finite, positive rate from a DolarAPI payload."""
    if not isinstance(data, dict):
        raise RateSourceUnavailable("DolarAPI: unexpected payload shape")

    for key in RATE_FIELDS:
        value = data.get(key)
        if value is None or isinstance(value, bool):
            continue
        try:
            rate = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(rate) and rate > 0:
            return rate

    raise RateSourceUnavailable("DolarAPI: no usable 'promedio' or 'venta' field")


class DolarApiRateSource:
    def __init__(
        self,
        url: str = DOLARAPI_OFFICIAL_URL,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch_rate(self) -> float:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise RateSourceUnavailable(
                f"DolarAPI error: {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise RateSourceUnavailable(
                f"DolarAPI unreachable ({type(exc).__name__})"
            ) from exc

        rate = parse_rate(data)
        logger.debug("DolarAPI rate: %s", rate)
        return rate
