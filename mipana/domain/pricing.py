"""
Fare Engine
===========

Formula (Bs)
------------
Fare = max((Base + Distance x Per_KM + Minutes x Per_Min + Fuel) x Surge, Min_Fare)

* **Fuel** = (fuel_price - 0.50) x 10, only when the fuel price is above the
  0.50 Bs reference price and the surcharge is enabled.
* The minimum fare is applied *after* surge, then the result is rounded to
  2 decimals with ties rounding up (``round2``).
* The ``breakdown`` reports the raw, pre-surge and pre-floor components, so
  it does not add up to ``amount_bs`` whenever surge != 1 or the floor kicks
  in.  Callers that need a reconciled view must derive it themselves.

USD conversion
--------------
USD amounts divide the Bs fare by the official BCV rate.  The rate comes from
a ``RateSource`` and is kept in a ``RateCache`` for one hour.  A failed fetch
never fails the fare: the configured fallback rate is used instead and the
result is flagged with ``used_fallback_rate``.

Complexity: O(1) per fare.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Optional, Protocol

from .enums import Currency
from .rounding import round2

logger = logging.getLogger(__name__)

REFERENCE_FUEL_PRICE = 0.50
FUEL_SURCHARGE_FACTOR = 10
RATE_CACHE_TTL_SECONDS = 3600.0
EXCHANGE_RATE_SOURCE_LABEL = "DolarAPI (BCV Oficial)"
DEFAULT_COMMISSION_RATE = 0.15
DEFAULT_FALLBACK_USD_RATE = 45.0


class RateSourceUnavailable(Exception):
    """Raised by a rate source when no usable rate could be obtained."""


class RateSource(Protocol):
    async def fetch_rate(self) -> float:
        """Return the current Bs-per-USD rate or raise RateSourceUnavailable."""


# ── Value objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class FareConfig:
    base_fare: float = 3.0
    per_km: float = 2.0
    per_min: float = 0.5
    min_fare: float = 5.0
    fuel_price: float = 0.50
    fallback_usd_rate: float = DEFAULT_FALLBACK_USD_RATE


@dataclass(frozen=True)
class FareOptions:
    currency: Currency = Currency.BS
    surge_multiplier: float = 1.0
    apply_fuel_surcharge: bool = True


@dataclass(frozen=True)
class FareComponents:
    base_fare: float
    distance_charge: float
    time_charge: float
    surge_multiplier: float
    fuel_surcharge: float


@dataclass(frozen=True)
class FareBreakdown:
    amount_bs: float
    currency: Currency
    breakdown: FareComponents
    amount_usd: Optional[float] = None
    exchange_rate: Optional[float] = None
    exchange_rate_source: Optional[str] = None
    used_fallback_rate: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "amount_bs": self.amount_bs,
            "currency": Currency(self.currency).value,
            "breakdown": asdict(self.breakdown),
        }
        if self.amount_usd is not None:
            data.update(
                amount_usd=self.amount_usd,
                exchange_rate=self.exchange_rate,
                exchange_rate_source=self.exchange_rate_source,
                used_fallback_rate=self.used_fallback_rate,
            )
        return data


@dataclass(frozen=True)
class Commission:
    total_fare: float
    platform_commission: float
    driver_earnings: float
    commission_rate: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class RateQuote:
    rate: float
    used_fallback: bool


@dataclass(frozen=True)
class RateCache:
    """Last successfully fetched rate, trusted for ``ttl_seconds``."""

    rate: Optional[float] = None
    fetched_at: Optional[float] = None
    ttl_seconds: float = RATE_CACHE_TTL_SECONDS

    def is_fresh(self, now: float) -> bool:
        if self.rate is None or self.fetched_at is None:
            return False
        return now - self.fetched_at < self.ttl_seconds

    async def refresh(
        self,
        source: Optional[RateSource],
        fallback_rate: float,
        now: float,
    ) -> tuple[RateQuote, RateCache]:
        """Return the rate to use at *now* together with the cache to keep.

        Failures are not cached: the next call after a failed fetch tries
        again.
        """
        if self.is_fresh(now):
            return RateQuote(self.rate, used_fallback=False), self

        if source is None:
            return RateQuote(fallback_rate, used_fallback=True), self

        try:
            rate = await source.fetch_rate()
        except RateSourceUnavailable as exc:
            logger.warning(
                "Exchange rate unavailable, using fallback %.2f: %s",
                fallback_rate,
                exc,
            )
            return RateQuote(fallback_rate, used_fallback=True), self

        logger.info("Exchange rate refreshed: %.4f", rate)
        return (
            RateQuote(rate, used_fallback=False),
            replace(self, rate=rate, fetched_at=now),
        )


# ── Engine ────────────────────────────────────────────────────────────


class FareEngine:
    """Prices trips in Bs and, on request, in USD.

    Owns its ``RateCache``.  Calls against one instance are expected to be
    serialized by the caller; two overlapping refreshes both fetch and the
    last one wins.
    """

    def __init__(
        self,
        config: FareConfig,
        rate_source: Optional[RateSource] = None,
        *,
        rate_cache: Optional[RateCache] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.rate_source = rate_source
        self.rate_cache = rate_cache if rate_cache is not None else RateCache()
        self._clock = clock

    @property
    def fallback_rate(self) -> float:
        """Configured fallback rate; a zero or negative one means the default."""
        rate = self.config.fallback_usd_rate
        return rate if rate > 0 else DEFAULT_FALLBACK_USD_RATE

    async def quote_exchange_rate(self) -> RateQuote:
        quote, self.rate_cache = await self.rate_cache.refresh(
            self.rate_source, self.fallback_rate, self._clock()
        )
        return quote

    async def get_exchange_rate(self) -> float:
        return (await self.quote_exchange_rate()).rate

    def price(
        self,
        distance_km: float,
        duration_min: float,
        options: Optional[FareOptions] = None,
    ) -> FareBreakdown:
        """Local-currency fare.  The step order is part of the contract."""
        options = options or FareOptions()
        cfg = self.config

        distance_charge = distance_km * cfg.per_km
        time_charge = duration_min * cfg.per_min
        fare = cfg.base_fare + distance_charge + time_charge

        fuel = 0.0
        if options.apply_fuel_surcharge and cfg.fuel_price > REFERENCE_FUEL_PRICE:
            fuel = (cfg.fuel_price - REFERENCE_FUEL_PRICE) * FUEL_SURCHARGE_FACTOR
            fare += fuel

        fare *= options.surge_multiplier
        fare = max(fare, cfg.min_fare)
        fare = round2(fare)

        return FareBreakdown(
            amount_bs=fare,
            currency=Currency.BS,
            breakdown=FareComponents(
                base_fare=round2(cfg.base_fare),
                distance_charge=round2(distance_charge),
                time_charge=round2(time_charge),
                surge_multiplier=options.surge_multiplier,
                fuel_surcharge=round2(fuel),
            ),
        )

    async def calculate(
        self,
        distance_km: float,
        duration_min: float,
        options: Optional[FareOptions] = None,
    ) -> FareBreakdown:
        options = options or FareOptions()
        fare = self.price(distance_km, duration_min, options)
        if options.currency != Currency.USD:
            return fare

        quote = await self.quote_exchange_rate()
        return replace(
            fare,
            currency=Currency.USD,
            amount_usd=round2(fare.amount_bs / quote.rate),
            exchange_rate=quote.rate,
            exchange_rate_source=EXCHANGE_RATE_SOURCE_LABEL,
            used_fallback_rate=quote.used_fallback,
        )

    @staticmethod
    def calculate_commission(
        fare_amount: float, commission_rate: float = DEFAULT_COMMISSION_RATE
    ) -> Commission:
        platform_commission = round2(fare_amount * commission_rate)
        return Commission(
            total_fare=fare_amount,
            platform_commission=platform_commission,
            driver_earnings=round2(fare_amount - platform_commission),
            commission_rate=commission_rate,
        )
