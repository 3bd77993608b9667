"""Pydantic argument models, one per tool.

Only types and defaults are checked.  Numeric ranges (negative distances,
coordinates outside [-90, 90] / [-180, 180], ratings outside 1-5) pass
through untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from mipana.domain.entities import Location
from mipana.domain.enums import (
    Currency,
    DriverStatus,
    PaymentMethod,
    RideStatus,
    ServiceType,
)


class Punto(BaseModel):
    latitud: float
    longitud: float

    def to_location(self) -> Location:
        return Location(self.latitud, self.longitud)


class PuntoConDireccion(Punto):
    direccion: str


class BuscarConductoresArgs(BaseModel):
    latitud: float
    longitud: float
    radio_km: Optional[float] = None  # server default when omitted


class CrearViajeArgs(BaseModel):
    user_id: str
    origen: PuntoConDireccion
    destino: PuntoConDireccion
    metodo_pago: PaymentMethod


class CalcularTarifaArgs(BaseModel):
    distancia_km: float
    duracion_min: Optional[float] = None
    tipo_servicio: ServiceType = ServiceType.EL_PANA
    moneda: Currency = Currency.BS
    multiplicador_demanda: float = Field(1.0, description="Surge multiplier")


class ActualizarUbicacionArgs(BaseModel):
    conductor_id: str
    latitud: float
    longitud: float
    rumbo: Optional[float] = None


class EstadisticasConductorArgs(BaseModel):
    conductor_id: str
    periodo: str = "today"


class CompletarViajeArgs(BaseModel):
    viaje_id: str
    distancia_real_km: float
    duracion_real_min: float
    calificacion: Optional[float] = None


class CalcularDistanciaArgs(BaseModel):
    origen: Punto
    destino: Punto


# ── Records returned inside tool payloads ─────────────────────────────


class DriverRecord(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    status: DriverStatus
    is_online: bool
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    heading: Optional[float] = None
    last_location_update: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RideRecord(BaseModel):
    id: str
    user_id: str
    driver_id: Optional[str] = None
    pickup_lat: float
    pickup_lng: float
    pickup_address: Optional[str] = None
    dropoff_lat: float
    dropoff_lng: float
    dropoff_address: Optional[str] = None
    payment_method: PaymentMethod
    status: RideStatus
    estimated_distance_km: Optional[float] = None
    estimated_duration_min: Optional[int] = None
    estimated_fare_bs: Optional[float] = None
    actual_distance_km: Optional[float] = None
    actual_duration_min: Optional[float] = None
    final_amount: Optional[float] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
