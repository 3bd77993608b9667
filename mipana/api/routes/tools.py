"""
Tool endpoints
==============

GET  /api/v1/tools       -- tool catalog (MCP ``tools/list``)
POST /api/v1/tools/call  -- invoke a tool (MCP ``tools/call``)

Tool failures are part of the response body (``isError``), never an HTTP
error status.
"""

from fastapi import APIRouter, Depends, Request

from mipana.api.dependencies import get_dispatcher
from mipana.api.middleware import limiter
from mipana.api.schemas import ToolCallRequest, ToolCallResponse, ToolListResponse
from mipana.tools.dispatcher import ToolDispatcher

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse, summary="List available tools")
async def list_tools(dispatcher: ToolDispatcher = Depends(get_dispatcher)):
    return ToolListResponse(tools=dispatcher.list_tools())


@router.post(
    "/call",
    response_model=ToolCallResponse,
    summary="Invoke a tool",
    description=(
        "Runs the named tool with the given arguments. The JSON payload is "
        "returned as text content; failed calls carry isError=true and a "
        "{success: false, error} payload."
    ),
)
@limiter.limit("100/minute")
async def call_tool(
    request: Request,
    body: ToolCallRequest,
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
):
    result = await dispatcher.call_tool(body.name, body.arguments)
    return result.as_content()
