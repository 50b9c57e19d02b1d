"""MCP tool server exposing the EDGAR registry lookups over stdio."""

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from .config import Config, load_config
from .edgar.client import EdgarClient

logger = logging.getLogger(__name__)

SERVER_NAME = "edgar-mcp"
DEFAULT_FILINGS_LIMIT = 10


def client_lifespan(client: EdgarClient):
    """FastMCP lifespan closing ``client`` when the server shuts down."""

    @asynccontextmanager
    async def lifespan(server: FastMCP):
        try:
            yield
        finally:
            logger.debug("Closing EDGAR client")
            await client.aclose()

    return lifespan


def create_server(config: Config, client: EdgarClient | None = None) -> FastMCP:
    """
    Build the MCP server and register the four EDGAR tools.

    Each tool is a thin wrapper: it calls the client and converts records
    to plain dicts for JSON serialization. A client created here is closed
    with the server; a client passed in stays owned by the caller.
    """
    if client is None:
        client = EdgarClient(config)
        mcp = FastMCP(SERVER_NAME, lifespan=client_lifespan(client))
    else:
        mcp = FastMCP(SERVER_NAME)

    @mcp.tool()
    async def search_company(query: str) -> list[dict]:
        """Search for companies by ticker or name.

        Args:
            query: Ticker symbol or part of a company name (case-insensitive).

        Returns:
            Matching companies with their 10-digit CIK, name and ticker.
        """
        logger.info("search_company called with query=%r", query)
        companies = await client.search_company(query)
        return [c.to_dict() for c in companies]

    @mcp.tool()
    async def get_company_info(cik: str) -> dict | None:
        """Get company details by CIK.

        Args:
            cik: Company CIK number, leading zeros optional.

        Returns:
            Name, SIC code and description, and tickers; null if not found.
        """
        logger.info("get_company_info called with cik=%r", cik)
        company = await client.get_company_info(cik)
        return company.to_dict() if company else None

    @mcp.tool()
    async def get_company_filings(
        cik: str,
        form: str | None = None,
        limit: int | None = None,
    ) -> dict | None:
        """Get SEC filings for a company, newest first.

        Args:
            cik: Company CIK number.
            form: Form type to keep, e.g. 10-K, 10-Q, 8-K.
            limit: Maximum number of filings to return (default 10).

        Returns:
            Company name and filings with links to the primary documents;
            null if not found.
        """
        logger.info("get_company_filings called with cik=%r form=%r limit=%r", cik, form, limit)
        if limit is None:
            limit = DEFAULT_FILINGS_LIMIT
        filings = await client.get_company_filings(cik, form=form, limit=limit)
        return filings.to_dict() if filings else None

    @mcp.tool()
    async def get_financial_statement(cik: str, concept: str, period: str, year: int) -> dict:
        """Get financial statement data for one concept and fiscal period.

        Args:
            cik: Company CIK number.
            concept: us-gaap concept, e.g. Assets, Liabilities, NetIncomeLoss.
            period: Fiscal period: Q1, Q2, Q3 or FY.
            year: Fiscal year, e.g. 2023.

        Returns:
            Always a result. data.conceptFound is false and data.error explains
            why when no value could be retrieved.
        """
        logger.info(
            "get_financial_statement called with cik=%r concept=%r period=%r year=%r",
            cik, concept, period, year,
        )
        statement = await client.get_financial_statement(cik, concept, period, year)
        return statement.to_dict()

    return mcp


def run_server(config: Config | None = None) -> None:
    """Run the MCP server on stdin/stdout."""
    config = config or load_config()
    mcp = create_server(config)
    logger.info("Starting %s on stdio", SERVER_NAME)
    mcp.run()
