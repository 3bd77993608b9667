"""
Integration tests for the REST API endpoints.

The dispatcher dependency is overridden with one bound to the in-memory
SQLite database, so the routes run end to end without PostgreSQL or network
access.
"""

import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mipana.api.app import create_app
from mipana.api.dependencies import get_dispatcher
from mipana.tools.catalog import TOOL_NAMES
from tests.conftest import CENTER, add_driver


# ── Fixture ───────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(dispatcher):
    app = create_app()
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _payload(resp) -> dict:
    return json.loads(resp.json()["content"][0]["text"])


# ── Tests ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_info(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "MI PANA APP MCP Server"
    assert data["status"] == "running"
    assert data["tools"] == TOOL_NAMES
    assert data["endpoints"]["tools_call"] == "/api/v1/tools/call"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_list_tools(client: AsyncClient):
    resp = await client.get("/api/v1/tools")
    assert resp.status_code == 200
    tools = resp.json()["tools"]
    assert [t["name"] for t in tools] == TOOL_NAMES
    assert all("inputSchema" in t for t in tools)


@pytest.mark.asyncio
async def test_call_tool(client: AsyncClient):
    resp = await client.post(
        "/api/v1/tools/call",
        json={
            "name": "calcular_tarifa",
            "arguments": {"distancia_km": 15, "duracion_min": 45},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["isError"] is False
    payload = _payload(resp)
    assert payload["success"] is True
    assert payload["tarifa"]["amount_bs"] == 55.5


@pytest.mark.asyncio
async def test_call_tool_reads_database(client: AsyncClient, session_factory):
    driver_id = await add_driver(session_factory)
    resp = await client.post(
        "/api/v1/tools/call",
        json={
            "name": "buscar_conductores_disponibles",
            "arguments": {"latitud": CENTER[0], "longitud": CENTER[1]},
        },
    )
    payload = _payload(resp)
    assert payload["total"] == 1
    assert payload["conductores"][0]["id"] == driver_id
    assert payload["conductores"][0]["distancia_km"] == 0.0


@pytest.mark.asyncio
async def test_unknown_tool_is_200_with_error(client: AsyncClient):
    resp = await client.post("/api/v1/tools/call", json={"name": "pedir_pizza"})
    assert resp.status_code == 200
    assert resp.json()["isError"] is True
    assert _payload(resp)["error"] == "Herramienta desconocida: pedir_pizza"


@pytest.mark.asyncio
async def test_malformed_body(client: AsyncClient):
    resp = await client.post("/api/v1/tools/call", json={"arguments": {}})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient):
    resp = await client.options(
        "/api/v1/tools/call",
        headers={
            "Origin": "https://app.mipana.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
