"""Raw website fetcher with plain-text extraction."""

from __future__ import annotations

import re

import httpx

from web3_analyst.providers.base import BaseProvider

_SCRIPT_RE = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_STYLE_RE = re.compile(
    r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE
)
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_text(html: str, max_chars: int) -> str:
    """Strip script/style blocks and tags, collapse whitespace, truncate."""
    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return text[:max_chars]


class WebsiteProvider(BaseProvider):
    """Fetch an arbitrary page and summarize its visible text."""

    name = "website"

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        max_chars: int = 1000,
    ) -> None:
        super().__init__(client, user_agent)
        self._max_chars = max_chars

    async def page_text(self, url: str) -> str:
        response = await self._get(url)
        text = extract_text(response.text, self._max_chars)
        return f"Content extracted from {url}:\n\n{text}..."
