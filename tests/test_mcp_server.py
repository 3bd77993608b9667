"""MCP surface: tool registration and delegation to the dispatcher."""

from unittest.mock import patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from mipana.mcp import server
from mipana.tools.catalog import TOOL_NAMES


@pytest.mark.asyncio
async def test_registers_every_catalog_tool():
    tools = await server.mcp.list_tools()
    assert sorted(t.name for t in tools) == sorted(TOOL_NAMES)


@pytest.mark.asyncio
async def test_tool_delegates_to_dispatcher(dispatcher):
    with patch.object(server, "get_dispatcher", return_value=dispatcher):
        payload = await server.calcular_tarifa(distancia_km=15, duracion_min=45)
    assert payload["success"] is True
    assert payload["tarifa"]["amount_bs"] == 55.5


@pytest.mark.asyncio
async def test_failure_raised_as_tool_error(dispatcher):
    with patch.object(server, "get_dispatcher", return_value=dispatcher):
        with pytest.raises(ToolError, match="Viaje no encontrado: nada"):
            await server.completar_viaje(
                viaje_id="nada", distancia_real_km=1, duracion_real_min=4
            )


@pytest.mark.asyncio
async def test_points_are_passed_through(dispatcher):
    with patch.object(server, "get_dispatcher", return_value=dispatcher):
        payload = await server.calcular_distancia(
            origen=server.Punto(latitud=0.0, longitud=0.0),
            destino=server.Punto(latitud=1.0, longitud=0.0),
        )
    assert payload["distancia_km"] == 111.19
