"""Runtime serving utilities for MCP stdio and SSE transports."""

from __future__ import annotations

import asyncio
import json
import secrets
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import StreamingResponse

from web3_analyst import __version__
from web3_analyst.analyst import Web3Analyst
from web3_analyst.mcp.server import MCPServer
from web3_analyst.mcp.transport import (
    SSETransportBuffer,
    is_notification,
    run_stdio_loop,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from web3_analyst.config import Settings

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SSE_POLL_INTERVAL = 0.25


def run_stdio_server(settings: Settings) -> None:
    """Run MCP server over stdio transport until stdin closes."""

    async def _serve() -> None:
        async with Web3Analyst(settings) as analyst:
            logger.info("mcp_stdio_started")
            await run_stdio_loop(MCPServer(analyst), sys.stdin, sys.stdout)
        logger.info("mcp_stdio_stopped")

    asyncio.run(_serve())


def create_sse_app(
    settings: Settings, analyst: Web3Analyst | None = None
) -> FastAPI:
    """Create FastAPI app for MCP over HTTP + SSE streaming.

    When ``analyst`` is given it is used as-is and left open on shutdown;
    otherwise the app builds one from ``settings`` inside its lifespan.
    When ``settings.mcp.shared_secret`` is set, the ``/mcp`` endpoints
    require ``Authorization: Bearer <secret>``.
    """
    buffer = SSETransportBuffer(max_events=settings.mcp.max_events)
    secret = settings.mcp.shared_secret
    state: dict[str, MCPServer] = {}

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if analyst is not None:
            state["server"] = MCPServer(analyst)
            yield
            return
        async with Web3Analyst(settings) as owned:
            state["server"] = MCPServer(owned)
            yield

    app = FastAPI(title="web3-analyst MCP", version=__version__, lifespan=lifespan)
    app.state.sse_buffer = buffer

    async def require_secret(
        authorization: str | None = Header(default=None),
    ) -> None:
        if secret is None or not secret.get_secret_value():
            return
        expected = f"Bearer {secret.get_secret_value()}"
        if authorization is None or not secrets.compare_digest(
            authorization.encode(), expected.encode()
        ):
            raise HTTPException(status_code=401, detail="Unauthorized")

    async def health() -> dict[str, str]:
        return {"status": "ok"}

    async def request_endpoint(
        payload: dict[str, object],
    ) -> dict[str, object] | None:
        if is_notification(payload):
            return None
        response = await state["server"].handle_request(payload)
        buffer.publish(response)
        return response

    async def events(
        request: Request,
        last_event_id: str | None = Header(default=None, alias="Last-Event-ID"),
    ) -> StreamingResponse:
        parsed = (
            int(last_event_id) if last_event_id and last_event_id.isdigit() else None
        )

        async def stream() -> AsyncIterator[str]:
            cursor = parsed
            while True:
                if await request.is_disconnected():
                    break
                for event in buffer.stream(cursor):
                    cursor = int(event["id"])
                    yield (
                        f"id: {event['id']}\n"
                        f"event: {event['event']}\n"
                        f"data: {json.dumps(event['data'])}\n\n"
                    )
                await asyncio.sleep(SSE_POLL_INTERVAL)

        return StreamingResponse(stream(), media_type="text/event-stream")

    guarded = [Depends(require_secret)]
    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route(
        "/mcp/request", request_endpoint, methods=["POST"], dependencies=guarded
    )
    app.add_api_route("/mcp/events", events, methods=["GET"], dependencies=guarded)

    return app


def run_sse_server(settings: Settings, host: str, port: int) -> None:
    """Run MCP server over SSE transport."""
    import uvicorn

    app = create_sse_app(settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.logging.level.lower())
