"""
Informational endpoints
=======================

GET /               -- server name, version, endpoints and tool names
GET /api/v1/health  -- simple health check
"""

from fastapi import APIRouter

from mipana.api.schemas import HealthResponse, InfoResponse
from mipana.config import settings
from mipana.tools.catalog import TOOL_NAMES

router = APIRouter(tags=["info"])

FEATURES = [
    "Integración con DolarAPI para tasa BCV en tiempo real",
    "Cálculo de tarifas con múltiples factores",
    "Búsqueda de conductores por geolocalización",
    "Cálculos geográficos precisos (Haversine)",
]


@router.get("/", response_model=InfoResponse, summary="Server information")
async def info():
    return InfoResponse(
        name=settings.server_name,
        version=settings.server_version,
        endpoints={
            "tools": "/api/v1/tools",
            "tools_call": "/api/v1/tools/call",
            "health": "/api/v1/health",
        },
        tools=TOOL_NAMES,
        features=FEATURES,
    )


@router.get("/api/v1/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
