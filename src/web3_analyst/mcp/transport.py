"""MCP transport helpers for stdio and SSE usage."""

from __future__ import annotations

import asyncio
import json
from collections import deque
from typing import IO, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from web3_analyst.mcp.server import MCPServer


def is_notification(payload: Any) -> bool:
    """Return True for JSON-RPC notifications, which get no response."""
    if not isinstance(payload, dict):
        return False
    return "id" not in payload and str(payload.get("method", "")).startswith(
        "notifications/"
    )


async def run_stdio_once(server: MCPServer, line: str) -> str | None:
    """Process a single stdio JSON request line.

    Returns the serialized response, or ``None`` for notifications.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        return json.dumps(
            {
                "jsonrpc": "2.0",
                "id": None,
                "result": None,
                "error": {"code": -32700, "message": f"Parse error: {exc}"},
            }
        )
    if is_notification(payload):
        return None
    response = await server.handle_request(payload)
    return json.dumps(response)


async def run_stdio_loop(
    server: MCPServer, input_stream: IO[str], output_stream: IO[str]
) -> None:
    """Process stdio requests until EOF."""
    while True:
        line = await asyncio.to_thread(input_stream.readline)
        if not line:
            break
        stripped = line.strip()
        if not stripped:
            continue
        response = await run_stdio_once(server, stripped)
        if response is None:
            continue
        output_stream.write(response + "\n")
        output_stream.flush()


class SSETransportBuffer:
    """In-memory SSE buffer for remote MCP clients."""

    def __init__(self, max_events: int = 200) -> None:
        self._events: deque[dict[str, object]] = deque(maxlen=max_events)
        self._next_id = 1

    def publish(self, payload: dict[str, object]) -> dict[str, object]:
        """Store and return an SSE-formatted event envelope."""
        event = {
            "id": self._next_id,
            "event": "message",
            "data": payload,
        }
        self._events.append(event)
        self._next_id += 1
        return event

    def stream(self, last_event_id: int | None = None) -> list[dict[str, object]]:
        """Return buffered events for SSE replay or catch-up."""
        if last_event_id is None:
            return list(self._events)
        return [event for event in self._events if int(event["id"]) > last_event_id]
