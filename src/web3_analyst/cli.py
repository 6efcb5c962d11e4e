"""Typer CLI entry point for the web3-analyst MCP server."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import structlog
import typer
from pydantic import ValidationError
from pydantic_core import to_jsonable_python
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from web3_analyst import __version__
from web3_analyst.analyst import Web3Analyst
from web3_analyst.config import Settings, format_validation_error
from web3_analyst.events import ALL_CATEGORIES
from web3_analyst.logging import configure_logging
from web3_analyst.mcp.serve import run_sse_server, run_stdio_server
from web3_analyst.mcp.server import MCPServer
from web3_analyst.models import PortfolioAsset

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="web3-analyst",
    help="Web3 project research, market data and portfolio tools over MCP.",
    no_args_is_help=True,
)
mcp_app = typer.Typer(help="MCP protocol server and diagnostics.")

app.add_typer(mcp_app, name="mcp")

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config YAML file."),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings(
    config_path: Path | None = None,
    **overrides: Any,
) -> Settings:
    """Load settings, configure logging, and report invalid config nicely."""
    try:
        settings = Settings.load(config_path=config_path, **overrides)
    except ValidationError as exc:
        err_console.print(
            Panel(
                format_validation_error(exc),
                title="Configuration Error",
                border_style="red",
            )
        )
        raise typer.Exit(code=1) from exc

    configure_logging(
        level=settings.logging.level,
        fmt=settings.logging.format,
        log_file=settings.logging.file,
    )
    return settings


def _run_analyst(
    settings: Settings, operation: Callable[[Web3Analyst], Awaitable[Any]]
) -> Any:
    async def _call() -> Any:
        async with Web3Analyst(settings) as analyst:
            return await operation(analyst)

    return asyncio.run(_call())


def _print_json(value: Any) -> None:
    console.print_json(data=to_jsonable_python(value, by_alias=True))


def _parse_holding(raw: str) -> PortfolioAsset:
    symbol, sep, amount = raw.partition("=")
    if not sep or not symbol.strip():
        raise typer.BadParameter(f"Expected SYMBOL=AMOUNT, got {raw!r}.")
    try:
        return PortfolioAsset(symbol=symbol.strip(), amount=float(amount))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid holding {raw!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Version callback
# ---------------------------------------------------------------------------


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]web3-analyst[/bold] {__version__}")
        raise typer.Exit


@app.callback()
def common(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """web3-analyst global options."""


# ---------------------------------------------------------------------------
# MCP commands
# ---------------------------------------------------------------------------


@mcp_app.command("serve")
def mcp_serve(
    transport: Annotated[
        str,
        typer.Option(
            "--transport",
            help="MCP transport: stdio or sse.",
        ),
    ] = "stdio",
    host: Annotated[
        str | None,
        typer.Option("--host", help="Host for SSE transport."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", help="Port for SSE transport."),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Serve the MCP protocol over stdio or SSE transport."""
    normalized = transport.strip().lower()
    if normalized not in {"stdio", "sse"}:
        raise typer.BadParameter("Transport must be 'stdio' or 'sse'.")

    settings = _load_settings(config)
    if normalized == "stdio":
        run_stdio_server(settings)
        return

    run_sse_server(
        settings,
        host=host or settings.mcp.host,
        port=port or settings.mcp.port,
    )


@mcp_app.command("tools")
def mcp_tools(config: ConfigOption = None) -> None:
    """List the tools advertised to MCP clients."""
    settings = _load_settings(config)

    async def _list() -> list[Any]:
        async with Web3Analyst(settings) as analyst:
            return MCPServer(analyst).tools.list_tools()

    table = Table(title="MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for tool in asyncio.run(_list()):
        table.add_row(tool.name, tool.description)
    console.print(table)


# ---------------------------------------------------------------------------
# Analyst commands
# ---------------------------------------------------------------------------


@app.command()
def report(
    project_name: Annotated[str, typer.Argument(help="Project name, e.g. ethereum.")],
    config: ConfigOption = None,
) -> None:
    """Generate a research report for a project."""
    settings = _load_settings(config)
    result = _run_analyst(
        settings, lambda analyst: analyst.generate_research_report(project_name)
    )
    console.print(Panel(result.overview, title=f"{project_name} Research Report"))
    _print_json(result)


@app.command()
def compare(
    project_names: Annotated[
        list[str], typer.Argument(help="Two or more project names.")
    ],
    config: ConfigOption = None,
) -> None:
    """Compare projects and rank them on each metric."""
    settings = _load_settings(config)
    result = _run_analyst(
        settings, lambda analyst: analyst.compare_projects(project_names)
    )
    _print_json(result)


@app.command()
def portfolio(
    holdings: Annotated[
        list[str], typer.Argument(help="Holdings as SYMBOL=AMOUNT, e.g. BTC=0.5.")
    ],
    config: ConfigOption = None,
) -> None:
    """Value a portfolio and show allocation per asset."""
    assets = [_parse_holding(raw) for raw in holdings]
    settings = _load_settings(config)
    result = _run_analyst(settings, lambda analyst: analyst.analyze_portfolio(assets))

    table = Table(title="Portfolio")
    table.add_column("Symbol", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Value (USD)", justify="right")
    table.add_column("Allocation", justify="right")
    for position in result.assets:
        allocation = (
            "-" if position.allocation is None else f"{position.allocation:.2f}%"
        )
        table.add_row(
            position.symbol,
            f"{position.amount:g}",
            f"{position.value:,.2f}",
            allocation,
        )
    console.print(table)
    console.print(f"[bold]Total:[/bold] ${result.total_value:,.2f}")


@app.command()
def events(
    category: Annotated[
        str,
        typer.Option("--category", help="conference, hackathon, upgrade, ..."),
    ] = ALL_CATEGORIES,
    limit: Annotated[int, typer.Option("--limit", min=1)] = 10,
    config: ConfigOption = None,
) -> None:
    """List upcoming ecosystem events."""
    settings = _load_settings(config)
    result = _run_analyst(
        settings, lambda analyst: analyst.get_upcoming_events(category, limit)
    )

    table = Table(title="Upcoming Events")
    table.add_column("Start", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Location")
    for event in result:
        table.add_row(
            event.start_date.isoformat(), event.name, event.category, event.location
        )
    console.print(table)


@app.command()
def sentiment(
    project_name: Annotated[str, typer.Argument(help="Project name or handle.")],
    config: ConfigOption = None,
) -> None:
    """Summarize social sentiment for a project."""
    settings = _load_settings(config)
    result = _run_analyst(
        settings, lambda analyst: analyst.analyze_social_sentiment(project_name)
    )
    _print_json(result)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
