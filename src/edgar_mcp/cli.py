"""EDGAR MCP command line interface."""

import asyncio
import json
from typing import Any, Awaitable, Callable

import click
import httpx

from .config import Config, configure_logging, load_config
from .edgar.client import EdgarClient


def _run(config: Config, call: Callable[[EdgarClient], Awaitable[Any]]) -> Any:
    """Run one client call on a fresh event loop, closing the client after."""

    async def main() -> Any:
        async with EdgarClient(config) as client:
            return await call(client)

    return asyncio.run(main())


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding default settings")
@click.option("--log-level", default=None, help="Logging level (default: INFO)")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """SEC EDGAR lookups and MCP server."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))
    if log_level:
        config.log_level = log_level
    configure_logging(config.log_level)
    ctx.obj["config"] = config


@cli.command("search")
@click.argument("query")
@click.option("--table", "as_table", is_flag=True, help="Render a table instead of JSON")
@click.pass_context
def search(ctx: click.Context, query: str, as_table: bool) -> None:
    """Search companies by ticker or name."""
    config = ctx.obj["config"]
    try:
        companies = _run(config, lambda client: client.search_company(query))
    except (ValueError, httpx.HTTPError) as e:
        raise click.ClickException(f"Search failed: {e}")

    if not as_table:
        _echo_json([c.to_dict() for c in companies])
        return

    if not companies:
        click.echo(f"No companies match '{query}'.")
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"Companies matching '{query}'")
    table.add_column("CIK")
    table.add_column("Ticker", style="cyan")
    table.add_column("Name")
    for c in companies:
        table.add_row(c.cik, ", ".join(c.tickers) or "-", c.name)
    Console().print(table)


@cli.command("company")
@click.argument("cik")
@click.pass_context
def company(ctx: click.Context, cik: str) -> None:
    """Show company details by CIK."""
    record = _run(ctx.obj["config"], lambda client: client.get_company_info(cik))
    if record is None:
        raise click.ClickException(f"Company with CIK {cik} not found")
    _echo_json(record.to_dict())


@cli.command("filings")
@click.argument("cik")
@click.option("--form", default=None, help="Form type filter, e.g. 10-K")
@click.option("--limit", default=10, type=click.IntRange(min=1), help="Maximum filings (default: 10)")
@click.pass_context
def filings(ctx: click.Context, cik: str, form: str | None, limit: int) -> None:
    """List recent filings for a company."""
    collection = _run(
        ctx.obj["config"],
        lambda client: client.get_company_filings(cik, form=form, limit=limit),
    )
    if collection is None:
        raise click.ClickException(f"Filings for CIK {cik} not found")
    _echo_json(collection.to_dict())


@cli.command("statement")
@click.argument("cik")
@click.argument("concept")
@click.argument("period")
@click.argument("year", type=int)
@click.pass_context
def statement(ctx: click.Context, cik: str, concept: str, period: str, year: int) -> None:
    """Look up one financial concept, e.g. `statement 320193 NetIncomeLoss FY 2023`."""
    result = _run(
        ctx.obj["config"],
        lambda client: client.get_financial_statement(cik, concept, period, year),
    )
    _echo_json(result.to_dict())


@cli.command("serve")
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Run the MCP server over stdio."""
    from .server import run_server

    run_server(ctx.obj["config"])


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
