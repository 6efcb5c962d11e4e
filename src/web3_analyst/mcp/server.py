"""MCP protocol server core implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from web3_analyst import __version__
from web3_analyst.mcp.models import (
    PROTOCOL_VERSION,
    MCPError,
    MCPInitializeParams,
    MCPRequest,
    MCPResponse,
    MCPServerInfo,
    MCPToolCallParams,
)
from web3_analyst.mcp.tools import MCPToolRegistry

if TYPE_CHECKING:
    from web3_analyst.analyst import Web3Analyst

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

INVALID_REQUEST = -32600
INVALID_PARAMS = -32602
SERVER_ERROR = -32000


class MCPServer:
    """Handle MCP protocol handshake and tool calls."""

    def __init__(self, analyst: Web3Analyst) -> None:
        self._tools = MCPToolRegistry(analyst)

    @property
    def tools(self) -> MCPToolRegistry:
        return self._tools

    def capabilities(self) -> dict[str, Any]:
        """Capabilities advertisement payload."""
        return {"tools": {"listChanged": False}}

    async def handle_request(self, request_payload: dict[str, Any]) -> dict[str, Any]:
        """Process one MCP request and return response payload.

        Never raises: every failure becomes a JSON-RPC error object.
        """
        try:
            request = MCPRequest.model_validate(request_payload)
        except ValidationError as exc:
            return MCPResponse(
                id=None,
                error=MCPError(code=INVALID_REQUEST, message=f"Invalid request: {exc}"),
            ).model_dump()

        try:
            result = await self._dispatch(request)
            return MCPResponse(id=request.id, result=result).model_dump()
        except ValueError as exc:
            return MCPResponse(
                id=request.id,
                error=MCPError(code=INVALID_PARAMS, message=str(exc)),
            ).model_dump()
        except Exception as exc:
            logger.exception("mcp_request_failed", method=request.method)
            return MCPResponse(
                id=request.id,
                error=MCPError(code=SERVER_ERROR, message=f"Server error: {exc}"),
            ).model_dump()

    async def _dispatch(self, request: MCPRequest) -> dict[str, Any]:
        method = request.method

        if method == "initialize":
            params = MCPInitializeParams.model_validate(request.params)
            logger.info(
                "mcp_initialize",
                client=params.client_info.get("name", "unknown"),
                protocol_version=params.protocol_version,
            )
            info = MCPServerInfo(version=__version__)
            return {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": self.capabilities(),
                "serverInfo": info.model_dump(),
            }
        elif method == "ping":
            return {}
        elif method == "tools/list":
            return {
                "tools": [
                    tool.model_dump(by_alias=True) for tool in self._tools.list_tools()
                ]
            }
        elif method == "tools/call":
            tool_params = MCPToolCallParams.model_validate(request.params)
            return await self._tools.call_tool(tool_params)

        raise ValueError(f"Unsupported method: {method}")
