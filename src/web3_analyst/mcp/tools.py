"""MCP tool registration and execution."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic_core import to_jsonable_python

from web3_analyst.logging import tool_logging_context
from web3_analyst.mcp.models import (
    CompareProjectsInput,
    GitHubActivityInput,
    LatestNewsInput,
    OnChainDataInput,
    PortfolioInput,
    PriceDataInput,
    ProjectInfoInput,
    ResearchReportInput,
    ScrapeWebsiteInput,
    SearchInput,
    SocialSentimentInput,
    ToolInfo,
    ToolInput,
    UpcomingEventsInput,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from web3_analyst.analyst import Web3Analyst
    from web3_analyst.mcp.models import MCPToolCallParams


@dataclass(frozen=True, slots=True)
class _Tool:
    name: str
    description: str
    input_model: type[ToolInput]
    handler: Callable[[Any], Awaitable[Any]]


class MCPToolRegistry:
    """Register and execute the analyst's MCP tools."""

    def __init__(self, analyst: Web3Analyst) -> None:
        self._analyst = analyst
        tools = [
            _Tool(
                "getProjectInfo",
                "Get comprehensive information about a Web3 project by name "
                "or ticker symbol.",
                ProjectInfoInput,
                lambda a: analyst.get_project_info(a.project_identifier),
            ),
            _Tool(
                "getPriceData",
                "Get current USD price, 24h change, market cap and volume for "
                "a cryptocurrency.",
                PriceDataInput,
                lambda a: analyst.get_price_data(a.symbol),
            ),
            _Tool(
                "getLatestNews",
                "Fetch the latest news about a Web3 project or topic.",
                LatestNewsInput,
                lambda a: analyst.get_latest_news(a.topic, a.limit),
            ),
            _Tool(
                "getOnChainData",
                "Get 24h on-chain activity metrics for a blockchain project.",
                OnChainDataInput,
                lambda a: analyst.get_on_chain_data(a.project_name),
            ),
            _Tool(
                "scrapeProjectWebsite",
                "Extract the visible text of a project's website.",
                ScrapeWebsiteInput,
                lambda a: analyst.scrape_project_website(a.website_url),
            ),
            _Tool(
                "getGitHubActivity",
                "Get stars, forks, issues, weekly commits and top contributors "
                "for a GitHub repository.",
                GitHubActivityInput,
                lambda a: analyst.get_github_activity(a.repo_owner, a.repo_name),
            ),
            _Tool(
                "generateResearchReport",
                "Generate a research report combining project, market, news, "
                "on-chain and GitHub data.",
                ResearchReportInput,
                lambda a: analyst.generate_research_report(a.project_name),
            ),
            _Tool(
                "analyzeSocialSentiment",
                "Summarize social media sentiment for a Web3 project.",
                SocialSentimentInput,
                lambda a: analyst.analyze_social_sentiment(a.project_name),
            ),
            _Tool(
                "compareProjects",
                "Compare projects on price, market cap and on-chain metrics "
                "with per-metric rankings.",
                CompareProjectsInput,
                lambda a: analyst.compare_projects(a.project_names),
            ),
            _Tool(
                "searchWeb3Info",
                "Search news, GitHub and Twitter for a query in parallel.",
                SearchInput,
                lambda a: analyst.search_web3_info(a.query, a.sources),
            ),
            _Tool(
                "analyzePortfolio",
                "Value a list of holdings and compute allocation and 24h change.",
                PortfolioInput,
                lambda a: analyst.analyze_portfolio(a.assets),
            ),
            _Tool(
                "getUpcomingEvents",
                "List upcoming conferences, hackathons, upgrades and other "
                "ecosystem events.",
                UpcomingEventsInput,
                lambda a: analyst.get_upcoming_events(a.category, a.limit),
            ),
        ]
        self._tools = {tool.name: tool for tool in tools}

    def list_tools(self) -> list[ToolInfo]:
        """Return advertised tools with JSON schemas."""
        return [
            ToolInfo(
                name=tool.name,
                description=tool.description,
                input_schema=tool.input_model.model_json_schema(),
            )
            for tool in self._tools.values()
        ]

    async def call_tool(self, payload: MCPToolCallParams) -> dict[str, Any]:
        """Execute a tool and return its MCP result content.

        Raises:
            ValueError: If the tool is unknown.
            pydantic.ValidationError: If the arguments do not match the
                tool's input schema.
        """
        tool = self._tools.get(payload.name)
        if tool is None:
            raise ValueError(f"Unknown tool: {payload.name}")

        arguments = tool.input_model.model_validate(payload.arguments)
        with tool_logging_context(tool.name):
            result = await tool.handler(arguments)

        payload_value = to_jsonable_python(result, by_alias=True)
        text = (
            payload_value
            if isinstance(payload_value, str)
            else json.dumps(payload_value)
        )
        structured = (
            payload_value
            if isinstance(payload_value, dict)
            else {"result": payload_value}
        )
        return {
            "content": [{"type": "text", "text": text}],
            "structuredContent": structured,
            "isError": False,
        }
