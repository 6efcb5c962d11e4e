"""Centralized exception hierarchy for the web3-analyst package.

All domain-specific exceptions inherit from ``Web3AnalystError`` so
callers can catch the entire family with a single ``except`` clause.
"""

from __future__ import annotations


class Web3AnalystError(Exception):
    """Base exception for all web3-analyst errors."""


# ---------------------------------------------------------------------------
# Upstream provider errors
# ---------------------------------------------------------------------------


class UpstreamError(Web3AnalystError):
    """Raised when an upstream provider call fails.

    Covers non-2xx responses and transport failures. ``status_code`` is
    ``None`` when no HTTP response was received.

    Attributes:
        provider: Short provider name (``"coingecko"``, ``"github"``, ...).
        status_code: HTTP status of the failed response, if any.
        body: Response body text or transport error message.
    """

    def __init__(self, provider: str, status_code: int | None, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "transport"
        super().__init__(f"{provider} API error: {status} {body}".rstrip())


class SchemaMismatchError(UpstreamError):
    """Raised when a provider response does not have the expected shape."""


# ---------------------------------------------------------------------------
# Search errors
# ---------------------------------------------------------------------------


class UnsupportedSourceError(Web3AnalystError):
    """Raised when a search names a source that has no handler."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Unsupported source: {source}")
