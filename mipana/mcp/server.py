"""MCP server (official python-sdk) exposing the MI PANA ride tools.

This uses FastMCP from the official MCP Python SDK:
- Tools are thin async functions decorated with @mcp.tool(); each one hands
  its arguments to the shared ToolDispatcher, the same one the REST API uses.
- Schemas are derived from the type hints / Pydantic models.
- Transport is stdio (default, for desktop MCP hosts) or streamable HTTP.
"""

from __future__ import annotations

import argparse
import logging
import sys
from functools import lru_cache
from typing import Any, Optional

import uvicorn
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from mipana.config import settings
from mipana.domain.enums import Currency, PaymentMethod, ServiceType
from mipana.infrastructure.database import async_session_factory
from mipana.tools.dispatcher import ToolDispatcher, create_dispatcher
from mipana.tools.schemas import Punto, PuntoConDireccion

# ---------------------------------------------------------------------------
# Server & tools
# ---------------------------------------------------------------------------

mcp = FastMCP(name="mipana-mcp", stateless_http=False)

# stdout carries the stdio transport, logs must go to stderr
logger = logging.getLogger("mipana-mcp")
logging.basicConfig(stream=sys.stderr, level=settings.log_level)


@lru_cache
def get_dispatcher() -> ToolDispatcher:
    return create_dispatcher(settings, async_session_factory)


async def _call(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    result = await get_dispatcher().call_tool(name, arguments)
    if result.is_error:
        raise ToolError(result.payload["error"])
    return result.payload


def _present(**arguments: Any) -> dict[str, Any]:
    """Drop optional arguments the caller did not send."""
    return {key: value for key, value in arguments.items() if value is not None}


@mcp.tool()
async def buscar_conductores_disponibles(
    latitud: float,
    longitud: float,
    radio_km: float = 5,
) -> dict[str, Any]:
    """Busca conductores disponibles en un radio específico alrededor de una ubicación."""
    return await _call(
        "buscar_conductores_disponibles",
        {"latitud": latitud, "longitud": longitud, "radio_km": radio_km},
    )


@mcp.tool()
async def crear_viaje(
    user_id: str,
    origen: PuntoConDireccion,
    destino: PuntoConDireccion,
    metodo_pago: PaymentMethod,
) -> dict[str, Any]:
    """Crea una nueva solicitud de viaje con origen y destino."""
    return await _call(
        "crear_viaje",
        {
            "user_id": user_id,
            "origen": origen.model_dump(),
            "destino": destino.model_dump(),
            "metodo_pago": metodo_pago,
        },
    )


@mcp.tool()
async def calcular_tarifa(
    distancia_km: float,
    duracion_min: Optional[float] = None,
    tipo_servicio: ServiceType = ServiceType.EL_PANA,
    moneda: Currency = Currency.BS,
    multiplicador_demanda: float = 1.0,
) -> dict[str, Any]:
    """Calcula la tarifa estimada de un viaje basado en distancia y duración.

    moneda: BS | USD (USD usa la tasa oficial BCV de DolarAPI).
    """
    return await _call(
        "calcular_tarifa",
        _present(
            distancia_km=distancia_km,
            duracion_min=duracion_min,
            tipo_servicio=tipo_servicio,
            moneda=moneda,
            multiplicador_demanda=multiplicador_demanda,
        ),
    )


@mcp.tool()
async def actualizar_ubicacion_conductor(
    conductor_id: str,
    latitud: float,
    longitud: float,
    rumbo: Optional[float] = None,
) -> dict[str, Any]:
    """Actualiza la ubicación en tiempo real de un conductor."""
    return await _call(
        "actualizar_ubicacion_conductor",
        _present(
            conductor_id=conductor_id, latitud=latitud, longitud=longitud, rumbo=rumbo
        ),
    )


@mcp.tool()
async def obtener_estadisticas_conductor(
    conductor_id: str,
    periodo: str = "today",
) -> dict[str, Any]:
    """Obtiene estadísticas de rendimiento de un conductor (today | week | month | all_time)."""
    return await _call(
        "obtener_estadisticas_conductor",
        {"conductor_id": conductor_id, "periodo": periodo},
    )


@mcp.tool()
async def completar_viaje(
    viaje_id: str,
    distancia_real_km: float,
    duracion_real_min: float,
    calificacion: Optional[float] = None,
) -> dict[str, Any]:
    """Marca un viaje como completado y calcula la tarifa final."""
    return await _call(
        "completar_viaje",
        _present(
            viaje_id=viaje_id,
            distancia_real_km=distancia_real_km,
            duracion_real_min=duracion_real_min,
            calificacion=calificacion,
        ),
    )


@mcp.tool()
async def calcular_distancia(origen: Punto, destino: Punto) -> dict[str, Any]:
    """Calcula la distancia entre dos puntos geográficos."""
    return await _call(
        "calcular_distancia",
        {"origen": origen.model_dump(), "destino": destino.model_dump()},
    )


# ---------------------------------------------------------------------------
# Streamable HTTP app & entry point
# ---------------------------------------------------------------------------

# MCP endpoint is /mcp
starlette_app = mcp.streamable_http_app()


def main() -> None:
    """Start the MCP server over stdio or streamable HTTP."""
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--transport", choices=["stdio", "streamable-http"], default="stdio"
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8765)
    args = parser.parse_args()

    if args.transport == "stdio":
        logger.info("Starting MI PANA MCP server on stdio")
        mcp.run(transport="stdio")
        return

    logger.info(
        "Starting MI PANA MCP server (streamable-http) on http://%s:%d/mcp",
        args.host,
        args.port,
    )
    uvicorn.run(
        starlette_app,
        host=args.host,
        port=args.port,
        reload=False,
        loop="asyncio",
    )


if __name__ == "__main__":
    main()
