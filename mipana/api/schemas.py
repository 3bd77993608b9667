"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ── Requests ──────────────────────────────────────────────────────────


class ToolCallRequest(BaseModel):
    name: str = Field(..., description="Tool name from the catalog.")
    arguments: dict[str, Any] = Field(default_factory=dict)


# ── Responses ─────────────────────────────────────────────────────────


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolCallResponse(BaseModel):
    content: list[TextContent]
    isError: bool = False


class ToolListResponse(BaseModel):
    tools: list[dict[str, Any]]


class InfoResponse(BaseModel):
    name: str
    version: str
    status: str = "running"
    endpoints: dict[str, str]
    tools: list[str]
    features: list[str]


class HealthResponse(BaseModel):
    status: str = "ok"
