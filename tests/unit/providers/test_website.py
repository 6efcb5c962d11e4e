"""Tests for website text extraction."""

from __future__ import annotations

import httpx
import pytest
import respx

from web3_analyst.exceptions import UpstreamError
from web3_analyst.providers import WebsiteProvider
from web3_analyst.providers.website import extract_text

PAGE = """
<html>
  <head>
    <style>body { color: red; }</style>
    <script type="text/javascript">var tracking = "<b>nope</b>";</script>
  </head>
  <body>
    <h1>Uniswap</h1>
    <p>Swap,   earn,
       and build.</p>
  </body>
</html>
"""


class TestExtractText:
    def test_strips_scripts_styles_and_tags(self) -> None:
        assert extract_text(PAGE, 1000) == "Uniswap Swap, earn, and build."

    def test_truncates_to_max_chars(self) -> None:
        assert extract_text(PAGE, 7) == "Uniswap"

    def test_plain_text_passthrough(self) -> None:
        assert extract_text("  hello \n world ", 100) == "hello world"


class TestWebsiteProvider:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_page_text_wraps_extracted_content(self) -> None:
        route = respx.get("https://uniswap.org/about").mock(
            return_value=httpx.Response(200, text=PAGE)
        )
        async with httpx.AsyncClient() as client:
            provider = WebsiteProvider(client, user_agent="test-agent")
            text = await provider.page_text("https://uniswap.org/about")

        assert route.calls.last.request.headers["User-Agent"] == "test-agent"
        assert text == (
            "Content extracted from https://uniswap.org/about:\n\n"
            "Uniswap Swap, earn, and build...."
        )

    @pytest.mark.asyncio()
    @respx.mock
    async def test_blocked_page_raises(self) -> None:
        respx.get("https://blocked.example/home").mock(
            return_value=httpx.Response(403, text="Forbidden")
        )
        async with httpx.AsyncClient() as client:
            provider = WebsiteProvider(client, user_agent="test-agent")
            with pytest.raises(UpstreamError) as excinfo:
                await provider.page_text("https://blocked.example/home")

        assert excinfo.value.provider == "website"
        assert excinfo.value.status_code == 403

    @pytest.mark.asyncio()
    @respx.mock
    async def test_unparseable_url_raises_upstream_error(self) -> None:
        async with httpx.AsyncClient() as client:
            provider = WebsiteProvider(client, user_agent="test-agent")
            with pytest.raises(UpstreamError) as excinfo:
                await provider.page_text("http://[::1")

        assert excinfo.value.provider == "website"
        assert excinfo.value.status_code is None
        assert excinfo.value.body
