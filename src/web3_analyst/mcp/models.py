"""MCP protocol models and tool schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from web3_analyst.aggregator import DEFAULT_SEARCH_SOURCES
from web3_analyst.models import PortfolioAsset, wire_name

PROTOCOL_VERSION = "2024-11-05"


class MCPError(BaseModel):
    """JSON-RPC error payload."""

    code: int
    message: str
    data: dict[str, Any] | None = None


class MCPRequest(BaseModel):
    """Incoming MCP request payload."""

    jsonrpc: str = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class MCPResponse(BaseModel):
    """Outgoing MCP response payload."""

    jsonrpc: str = "2.0"
    id: str | int | None = None
    result: dict[str, Any] | None = None
    error: MCPError | None = None


class ToolInfo(BaseModel):
    """Advertised MCP tool descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class MCPInitializeParams(BaseModel):
    """Initialization parameters from client."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(default=PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: dict[str, Any] = Field(default_factory=dict, alias="clientInfo")


class MCPServerInfo(BaseModel):
    """Server identity."""

    name: str = "web3-analyst"
    version: str


class MCPToolCallParams(BaseModel):
    """Tool call request params."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Tool inputs (argument names are camelCase on the wire)
# ---------------------------------------------------------------------------


class ToolInput(BaseModel):
    """Base for tool argument schemas."""

    model_config = ConfigDict(
        alias_generator=wire_name,
        populate_by_name=True,
        extra="forbid",
    )


class ProjectInfoInput(ToolInput):
    project_identifier: str = Field(
        min_length=1,
        description='Name or ticker of the project (e.g. "Ethereum" or "ETH").',
    )


class PriceDataInput(ToolInput):
    symbol: str = Field(min_length=1, description='Ticker symbol (e.g. "BTC").')


class LatestNewsInput(ToolInput):
    topic: str = Field(min_length=1, description="Project name or general topic.")
    limit: int = Field(default=5, ge=1, le=50)


class OnChainDataInput(ToolInput):
    project_name: str = Field(min_length=1)


class ScrapeWebsiteInput(ToolInput):
    website_url: str = Field(pattern=r"^https?://", description="Absolute page URL.")


class GitHubActivityInput(ToolInput):
    repo_owner: str = Field(min_length=1)
    repo_name: str = Field(min_length=1)


class ResearchReportInput(ToolInput):
    project_name: str = Field(min_length=1)


class SocialSentimentInput(ToolInput):
    project_name: str = Field(
        min_length=1, description="Project name or its Twitter handle."
    )


class CompareProjectsInput(ToolInput):
    project_names: list[str] = Field(min_length=1)


class SearchInput(ToolInput):
    query: str = Field(min_length=1)
    sources: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_SOURCES),
        description="Any of: news, github, twitter.",
    )


class PortfolioInput(ToolInput):
    assets: list[PortfolioAsset] = Field(min_length=1)


class UpcomingEventsInput(ToolInput):
    category: str = Field(
        default="all",
        description="conference, hackathon, upgrade, governance, ama, or all.",
    )
    limit: int = Field(default=10, ge=1, le=100)
