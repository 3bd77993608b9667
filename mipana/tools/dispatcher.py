"""
Tool dispatcher
===============

Maps tool names from the catalog to handlers.  Every handler validates its
arguments, calls the domain (distance, fare engine, search, statistics) and
the repositories, and returns a ``ToolResult`` whose payload is rendered as
MCP text content.

Failures never escape as exceptions: unknown tools, invalid arguments and
data-store errors become ``{"success": false, "error": ...}`` payloads with
``isError`` set.  Exchange-rate failures are absorbed earlier, inside the
fare engine.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mipana.config import Settings
from mipana.domain.distance import estimate_trip, eta_minutes
from mipana.domain.entities import Location
from mipana.domain.enums import CLOSED_RIDE_STATUSES
from mipana.domain.matching import drivers_within_radius
from mipana.domain.pricing import FareEngine, FareOptions, RateCache
from mipana.domain.stats import period_start, summarize_driver_rides
from mipana.infrastructure.rate_source import DolarApiRateSource
from mipana.infrastructure.repositories import DriverRepository, RideRepository
from mipana.tools.catalog import TOOL_CATALOG
from mipana.tools.schemas import (
    ActualizarUbicacionArgs,
    BuscarConductoresArgs,
    CalcularDistanciaArgs,
    CalcularTarifaArgs,
    CompletarViajeArgs,
    CrearViajeArgs,
    DriverRecord,
    EstadisticasConductorArgs,
    RideRecord,
)

logger = logging.getLogger(__name__)


class UnknownTool(Exception):
    def __init__(self, name: str):
        super().__init__(f"Herramienta desconocida: {name}")
        self.name = name


class UpstreamDataError(Exception):
    """The data store failed or did not hold the requested record."""


@dataclass(frozen=True)
class ToolResult:
    payload: dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def ok(cls, **payload: Any) -> ToolResult:
        return cls({"success": True, **payload})

    @classmethod
    def failure(cls, message: str) -> ToolResult:
        return cls({"success": False, "error": message}, is_error=True)

    def as_text(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)

    def as_content(self) -> dict[str, Any]:
        """MCP ``tools/call`` result shape."""
        return {
            "content": [{"type": "text", "text": self.as_text()}],
            "isError": self.is_error,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


Handler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


class ToolDispatcher:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        fare_engine: FareEngine,
        *,
        commission_rate: float = 0.15,
        default_radius_km: float = 5.0,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.session_factory = session_factory
        self.fare_engine = fare_engine
        self.commission_rate = commission_rate
        self.default_radius_km = default_radius_km
        self._now = now
        self._handlers: dict[str, Handler] = {
            "buscar_conductores_disponibles": self._search_drivers,
            "crear_viaje": self._create_ride,
            "calcular_tarifa": self._quote_fare,
            "actualizar_ubicacion_conductor": self._update_driver_location,
            "obtener_estadisticas_conductor": self._driver_stats,
            "completar_viaje": self._complete_ride,
            "calcular_distancia": self._measure_distance,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        return TOOL_CATALOG

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> ToolResult:
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownTool(name)
            return await handler(arguments or {})
        except (UnknownTool, UpstreamDataError, ValidationError) as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return ToolResult.failure(str(exc))

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Unit of work: commit on success, rollback on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise UpstreamDataError(f"Error de base de datos: {exc}") from exc
            except Exception:
                await session.rollback()
                raise

    # ── Handlers ──────────────────────────────────────────────────────

    async def _search_drivers(self, arguments: dict[str, Any]) -> ToolResult:
        params = BuscarConductoresArgs.model_validate(arguments)
        radius = (
            params.radio_km if params.radio_km is not None else self.default_radius_km
        )

        async with self._session() as session:
            drivers = await DriverRepository(session).get_available_online()

        nearby = drivers_within_radius(
            Location(params.latitud, params.longitud), drivers, radius
        )
        conductores = [
            {
                **DriverRecord.model_validate(driver).model_dump(mode="json"),
                "distancia_km": distance,
            }
            for driver, distance in nearby
        ]
        return ToolResult.ok(
            total=len(conductores),
            conductores=conductores,
            area_busqueda={
                "centro": {"latitud": params.latitud, "longitud": params.longitud},
                "radio_km": radius,
            },
        )

    async def _create_ride(self, arguments: dict[str, Any]) -> ToolResult:
        params = CrearViajeArgs.model_validate(arguments)
        trip = estimate_trip(params.origen.to_location(), params.destino.to_location())
        fare = await self.fare_engine.calculate(trip.distance_km, trip.duration_min)

        async with self._session() as session:
            ride = await RideRepository(session).create_ride(
                user_id=params.user_id,
                pickup_lat=params.origen.latitud,
                pickup_lng=params.origen.longitud,
                pickup_address=params.origen.direccion,
                dropoff_lat=params.destino.latitud,
                dropoff_lng=params.destino.longitud,
                dropoff_address=params.destino.direccion,
                payment_method=params.metodo_pago,
                estimated_distance_km=trip.distance_km,
                estimated_duration_min=trip.duration_min,
                estimated_fare_bs=fare.amount_bs,
                created_at=self._now(),
            )
            viaje = RideRecord.model_validate(ride).model_dump(mode="json")

        logger.info("Ride %s created for user %s", viaje["id"], params.user_id)
        return ToolResult.ok(
            viaje=viaje,
            estimacion_tarifa=fare.to_dict(),
            distancia_km=trip.distance_km,
            duracion_estimada_min=trip.duration_min,
        )

    async def _quote_fare(self, arguments: dict[str, Any]) -> ToolResult:
        params = CalcularTarifaArgs.model_validate(arguments)
        # a missing or zero duration falls back to the ETA
        duration = params.duracion_min or eta_minutes(params.distancia_km)
        fare = await self.fare_engine.calculate(
            params.distancia_km,
            duration,
            FareOptions(
                currency=params.moneda,
                surge_multiplier=params.multiplicador_demanda,
            ),
        )
        return ToolResult.ok(
            tipo_servicio=params.tipo_servicio.value,
            distancia_km=params.distancia_km,
            duracion_min=duration,
            tarifa=fare.to_dict(),
        )

    async def _update_driver_location(self, arguments: dict[str, Any]) -> ToolResult:
        params = ActualizarUbicacionArgs.model_validate(arguments)

        async with self._session() as session:
            driver = await DriverRepository(session).update_location(
                params.conductor_id,
                lat=params.latitud,
                lng=params.longitud,
                heading=params.rumbo,
                at=self._now(),
            )
            if driver is None:
                raise UpstreamDataError(
                    f"Conductor no encontrado: {params.conductor_id}"
                )
            conductor = DriverRecord.model_validate(driver).model_dump(mode="json")

        return ToolResult.ok(
            conductor=conductor,
            mensaje="Ubicación actualizada correctamente",
        )

    async def _driver_stats(self, arguments: dict[str, Any]) -> ToolResult:
        params = EstadisticasConductorArgs.model_validate(arguments)
        since = period_start(params.periodo, self._now())

        async with self._session() as session:
            rides = await RideRepository(session).get_driver_rides_since(
                params.conductor_id, since, CLOSED_RIDE_STATUSES
            )

        stats = summarize_driver_rides(params.periodo, rides)
        return ToolResult.ok(estadisticas=stats.to_dict())

    async def _complete_ride(self, arguments: dict[str, Any]) -> ToolResult:
        params = CompletarViajeArgs.model_validate(arguments)
        fare = await self.fare_engine.calculate(
            params.distancia_real_km, params.duracion_real_min
        )
        commission = self.fare_engine.calculate_commission(
            fare.amount_bs, self.commission_rate
        )

        async with self._session() as session:
            ride = await RideRepository(session).complete_ride(
                params.viaje_id,
                actual_distance_km=params.distancia_real_km,
                actual_duration_min=params.duracion_real_min,
                final_amount=fare.amount_bs,
                completed_at=self._now(),
                rating=params.calificacion,
            )
            if ride is None:
                raise UpstreamDataError(f"Viaje no encontrado: {params.viaje_id}")
            viaje = RideRecord.model_validate(ride).model_dump(mode="json")

        return ToolResult.ok(
            viaje=viaje,
            tarifa_final=fare.to_dict(),
            comision=commission.to_dict(),
            mensaje="Viaje completado exitosamente",
        )

    async def _measure_distance(self, arguments: dict[str, Any]) -> ToolResult:
        params = CalcularDistanciaArgs.model_validate(arguments)
        trip = estimate_trip(params.origen.to_location(), params.destino.to_location())
        return ToolResult.ok(
            distancia_km=trip.distance_km,
            duracion_estimada_min=trip.duration_min,
            origen=params.origen.model_dump(),
            destino=params.destino.model_dump(),
        )


# ── Wiring ────────────────────────────────────────────────────────────


def create_fare_engine(settings: Settings) -> FareEngine:
    source = (
        DolarApiRateSource(
            settings.rate_source_url, settings.rate_source_timeout_seconds
        )
        if settings.live_exchange_rate
        else None
    )
    return FareEngine(
        settings.fare_config(),
        source,
        rate_cache=RateCache(ttl_seconds=settings.rate_cache_ttl_seconds),
    )


def create_dispatcher(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> ToolDispatcher:
    return ToolDispatcher(
        session_factory,
        create_fare_engine(settings),
        commission_rate=settings.platform_commission_rate,
        default_radius_km=settings.default_search_radius_km,
    )
