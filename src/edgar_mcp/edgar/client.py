"""SEC EDGAR HTTP client with request pacing and best-effort decoding."""

import asyncio
import json
import logging
from datetime import date
from typing import Any

import httpx

from ..config import Config
from .models import (
    CompanyRecord,
    FilingCollection,
    FinancialStatementResult,
    StatementStatus,
    normalize_cik,
)
from .parser import ConceptLookup, decode_concept, parse_company_info, parse_ticker_index, search_ticker_index
from .rate_limit import RateLimiter
from .streaming import FetchResult, StreamingFetcher
from .submissions import parse_filings

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
TIMEOUT_COMPANY = "Timeout Occurred"
ERROR_COMPANY = "Error Occurred"
DEFAULT_FORM = "10-K"


class EdgarClient:
    """
    Async client for the SEC EDGAR registry.

    Every upstream request goes through one RateLimiter, so concurrent
    lookups share a single in-flight slot.
    """

    def __init__(
        self,
        config: Config,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.limiter = RateLimiter(cooldown=config.request_cooldown)

        logger.info("Using SEC EDGAR API User-Agent: %s", config.user_agent)
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
            timeout=config.http_timeout,
            follow_redirects=True,
            transport=transport,
        )
        self.fetcher = StreamingFetcher(self._client, timeout=config.concept_timeout)

    def submissions_url(self, cik: str) -> str:
        return f"{self.config.submissions_url}/CIK{cik}.json"

    def concept_url(self, cik: str, concept: str) -> str:
        return f"{self.config.concept_url}/CIK{cik}/{self.config.taxonomy}/{concept}.json"

    async def get_json(self, url: str) -> Any:
        """
        Fetch and parse JSON from a URL, holding the rate limiter slot.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError: If the body is not valid JSON
        """
        async with self.limiter:
            response = await self._client.get(url)
            response.raise_for_status()
            return json.loads(response.content)

    async def search_company(self, query: str) -> list[CompanyRecord]:
        """
        Search the bulk ticker index by ticker or company name.

        Args:
            query: Case-insensitive substring of a ticker or name

        Returns:
            Matching companies, possibly empty

        Raises:
            ValueError: If the query is blank or the index is malformed
            httpx.HTTPError: If the index cannot be fetched
        """
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")

        try:
            index = await self.get_json(self.config.tickers_url)
            records = parse_ticker_index(index)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error searching for company with query %r: %s", query, e)
            raise

        matches = search_ticker_index(records, query)
        logger.debug("Search %r matched %d of %d companies", query, len(matches), len(records))
        return matches

    async def get_company_info(self, cik: str) -> CompanyRecord | None:
        """
        Get company details by CIK.

        Returns:
            CompanyRecord, or None if the company could not be fetched or decoded
        """
        try:
            cik = normalize_cik(cik)
            submissions = await self.get_json(self.submissions_url(cik))
            return parse_company_info(cik, submissions)
        except Exception as e:
            logger.warning("Error getting company info for CIK %s: %s", cik, e)
            return None

    async def get_company_filings(
        self,
        cik: str,
        form: str | None = None,
        limit: int = 10,
    ) -> FilingCollection | None:
        """
        Get recent filings for a company.

        Args:
            cik: CIK number, with or without leading zeros
            form: Form type to keep, e.g. "10-K" (case-insensitive)
            limit: Maximum number of filings to return

        Returns:
            FilingCollection, or None if the filings could not be fetched
        """
        if limit <= 0:
            logger.warning("Invalid filings limit %d for CIK %s", limit, cik)
            return None

        try:
            cik = normalize_cik(cik)
            submissions = await self.get_json(self.submissions_url(cik))
            return parse_filings(cik, submissions, form=form or None, limit=limit)
        except Exception as e:
            logger.warning("Error getting filings for CIK %s: %s", cik, e)
            return None

    async def get_financial_statement(
        self,
        cik: str,
        concept: str,
        period: str,
        year: int,
    ) -> FinancialStatementResult:
        """
        Get one financial concept value for a fiscal period.

        Never raises. Failures come back as a result with
        ``data["conceptFound"] == False`` and an ``error`` string; a lookup
        exceeding ``statement_timeout`` returns a fixed timeout placeholder.

        Args:
            cik: CIK number
            concept: us-gaap concept name, e.g. "Revenues" or "NetIncomeLoss"
            period: Fiscal period: Q1, Q2, Q3 or FY
            year: Fiscal year
        """
        try:
            return await asyncio.wait_for(
                self._fetch_financial_statement(cik, concept, period, year),
                timeout=self.config.statement_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Financial statement lookup for CIK %s %s %s %s exceeded %.0fs",
                cik, concept, period, year, self.config.statement_timeout,
            )
            return _placeholder(
                cik, period, year, TIMEOUT_COMPANY, StatementStatus.DEADLINE_EXCEEDED,
                f"Request timed out after {self.config.statement_timeout:g} seconds",
            )
        except Exception as e:
            logger.exception("Unhandled error in financial statement lookup for CIK %s", cik)
            return _placeholder(
                cik, period, year, ERROR_COMPANY, StatementStatus.UNEXPECTED_ERROR,
                f"An error occurred: {e}",
            )

    async def _lookup_company_name(self, cik: str) -> str:
        """Best-effort display name; never fails the caller."""
        try:
            company = await asyncio.wait_for(
                self.get_company_info(cik), timeout=self.config.name_lookup_timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Company name lookup for CIK %s timed out", cik)
            return UNKNOWN_COMPANY
        if company is None or not company.name:
            return UNKNOWN_COMPANY
        return company.name

    async def _fetch_financial_statement(
        self,
        cik: str,
        concept: str,
        period: str,
        year: int,
    ) -> FinancialStatementResult:
        logger.debug("Financial statement - CIK: %s, concept: %s, period: %s, year: %s",
                     cik, concept, period, year)

        if not (cik or "").strip() or not (concept or "").strip() or not (period or "").strip():
            logger.warning("Financial statement lookup with blank parameters")
            return _placeholder(
                cik, period or "", year, UNKNOWN_COMPANY,
                StatementStatus.INVALID_INPUT, "Invalid parameters",
            )

        period = period.strip().upper()
        concept = concept.strip()
        try:
            cik = normalize_cik(cik)
        except ValueError as e:
            return _placeholder(
                cik, period, year, UNKNOWN_COMPANY,
                StatementStatus.INVALID_INPUT, f"Invalid parameters: {e}",
            )

        company_name = await self._lookup_company_name(cik)
        data: dict[str, Any] = {}

        try:
            url = self.concept_url(cik, concept)
            logger.debug("Requesting %s", url)
            async with self.limiter:
                fetched = await self.fetcher.fetch(url)
            status, lookup = self._interpret(fetched, concept, period, year, data)
        except Exception as e:
            logger.error("Unhandled exception fetching %s for CIK %s: %s", concept, cik, e)
            status, lookup = StatementStatus.UNEXPECTED_ERROR, None
            data["error"] = f"Unhandled exception: {e}"
            data["conceptFound"] = False

        return FinancialStatementResult(
            cik=cik,
            company_name=company_name,
            form=(lookup.form if lookup and lookup.form else DEFAULT_FORM),
            filing_date=(lookup.filed if lookup and lookup.filed else date.today().isoformat()),
            fiscal_year=year,
            fiscal_period=period,
            data=data,
            status=status,
        )

    def _interpret(
        self,
        fetched: FetchResult,
        concept: str,
        period: str,
        year: int,
        data: dict[str, Any],
    ) -> tuple[StatementStatus, ConceptLookup | None]:
        """Turn a fetch outcome into a status, filling ``data`` with diagnostics."""
        if fetched.error is not None:
            data["error"] = f"HTTP request error: {fetched.error}"
            data["conceptFound"] = False
            return StatementStatus.REQUEST_ERROR, None

        if fetched.status_code is not None and not fetched.ok:
            data["error"] = f"HTTP error: {fetched.status_code} {fetched.reason}".rstrip()
            data["conceptFound"] = False
            return StatementStatus.HTTP_ERROR, None

        if not fetched.body:
            if fetched.timed_out:
                data["error"] = "Request timed out"
                data["timeout"] = True
                data["conceptFound"] = False
                return StatementStatus.TIMEOUT, None
            data["error"] = "No data received from API"
            data["conceptFound"] = False
            return StatementStatus.EMPTY_RESPONSE, None

        if fetched.timed_out:
            logger.warning("Using %d bytes of partial data for %s", len(fetched.body), concept)

        lookup = decode_concept(
            fetched.body, concept, period, year, excerpt_limit=self.config.excerpt_limit
        )

        if lookup.status is StatementStatus.MALFORMED:
            logger.warning("JSON parsing error with %s data for %s: %s",
                           "partial" if fetched.timed_out else "complete", concept, lookup.error)
            data["error"] = lookup.error
            data["conceptFound"] = False
            data["partialResponse"] = True
            data["partialData"] = lookup.partial_data
            return lookup.status, lookup

        if lookup.status is StatementStatus.MISSING_UNITS:
            data["error"] = lookup.error
            data["conceptFound"] = False
            data["partialResponse"] = True
            return lookup.status, lookup

        if lookup.unit is not None:
            data["unit"] = lookup.unit
        if lookup.status is StatementStatus.FOUND:
            data[concept] = lookup.value
        elif lookup.status is StatementStatus.NULL_VALUE:
            data[concept] = None
            data["nullValue"] = True
        data["taxonomy"] = self.config.taxonomy
        data["conceptFound"] = lookup.found
        if not lookup.found:
            data["error"] = lookup.error
        if fetched.timed_out:
            data["partialResponse"] = True
        return lookup.status, lookup

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "EdgarClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


def _placeholder(
    cik: str,
    period: str,
    year: int,
    company_name: str,
    status: StatementStatus,
    error: str,
) -> FinancialStatementResult:
    """Result for a lookup that never reached a concept document."""
    return FinancialStatementResult(
        cik=cik,
        company_name=company_name,
        form=DEFAULT_FORM,
        filing_date=date.today().isoformat(),
        fiscal_year=year,
        fiscal_period=period,
        data={"error": error, "conceptFound": False},
        status=status,
    )
