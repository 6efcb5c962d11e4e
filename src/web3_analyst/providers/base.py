"""Shared HTTP plumbing for provider adapters.

An adapter issues its upstream call through ``BaseProvider._get_json``
which turns every failure mode (transport error, non-2xx status, body
that is not JSON) into ``UpstreamError``. Parsed payloads are validated
against private response schemas with ``_validate`` so a shape mismatch
fails closed the same way.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from web3_analyst.exceptions import SchemaMismatchError, UpstreamError
from web3_analyst.models import Clock, utcnow

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

T = TypeVar("T")


class BaseProvider:
    """Stateless adapter over one upstream API."""

    name: str = "upstream"

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        clock: Clock = utcnow,
    ) -> None:
        self._client = client
        self._user_agent = user_agent
        self._clock = clock

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.get(
                url, headers=self._headers(), params=params
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message = str(exc) or type(exc).__name__
            raise UpstreamError(self.name, None, message) from exc

        if not response.is_success:
            raise UpstreamError(self.name, response.status_code, response.text)

        logger.debug(
            "upstream_ok",
            provider=self.name,
            url=str(response.url),
            status_code=response.status_code,
        )
        return response

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._get(url, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise SchemaMismatchError(
                self.name, response.status_code, f"invalid JSON body: {exc}"
            ) from exc

    def _validate(self, schema: type[T], payload: Any) -> T:
        try:
            return TypeAdapter(schema).validate_python(payload)
        except ValidationError as exc:
            raise SchemaMismatchError(
                self.name, None, f"unexpected response shape: {exc}"
            ) from exc


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters and append an ellipsis marker."""
    return text[:limit] + "..."
