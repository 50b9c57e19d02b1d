"""Decoders for SEC EDGAR JSON payloads."""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .models import CompanyRecord, StatementStatus

TRUNCATION_MARKER = "... (truncated)"


@dataclass
class ConceptLookup:
    """Result of scanning a companyconcept document for one fiscal period."""

    status: StatementStatus
    value: str | None = None
    unit: str | None = None
    filed: str | None = None
    form: str | None = None
    error: str | None = None
    partial_data: str | None = None

    @property
    def found(self) -> bool:
        return self.status.concept_found


def _get_str(data: dict, key: str) -> str | None:
    """Return a non-empty string field, or None."""
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def excerpt(body: bytes, limit: int = 1000) -> str:
    """Decode the first ``limit`` characters of a raw payload for diagnostics."""
    text = body.decode("utf-8", errors="replace")
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def parse_ticker_index(payload: Any) -> list[CompanyRecord]:
    """
    Parse the bulk company_tickers.json index.

    The index is an object keyed by row number:
    {"0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."}, ...}

    Args:
        payload: Decoded JSON document

    Returns:
        One CompanyRecord per usable row, in upstream order

    Raises:
        ValueError: If the document is not a JSON object
    """
    if not isinstance(payload, dict):
        raise ValueError("Ticker index must be a JSON object")

    records: list[CompanyRecord] = []
    for entry in payload.values():
        if not isinstance(entry, dict):
            continue
        cik_raw = entry.get("cik_str")
        if isinstance(cik_raw, bool) or not isinstance(cik_raw, (int, str)):
            continue
        cik_str = str(cik_raw).strip()
        if not cik_str.isdigit():
            continue

        ticker = entry.get("ticker")
        ticker = ticker.strip() if isinstance(ticker, str) else ""
        title = entry.get("title")
        records.append(
            CompanyRecord(
                cik=cik_str.zfill(10),
                name=title if isinstance(title, str) else "",
                tickers=[ticker] if ticker else [],
            )
        )
    return records


def search_ticker_index(records: list[CompanyRecord], query: str) -> list[CompanyRecord]:
    """Case-insensitive substring match against ticker or company name."""
    needle = query.strip().casefold()
    return [
        r
        for r in records
        if needle in r.name.casefold() or any(needle in t.casefold() for t in r.tickers)
    ]


def parse_company_info(cik: str, payload: Any) -> CompanyRecord:
    """
    Parse a submissions document into a CompanyRecord.

    Missing fields never fail the decode: a missing name becomes "" and
    missing tickers an empty list.
    """
    if not isinstance(payload, dict):
        raise ValueError("Submissions document must be a JSON object")

    name = payload.get("name")
    tickers_raw = payload.get("tickers")
    tickers = [t for t in tickers_raw if isinstance(t, str)] if isinstance(tickers_raw, list) else []

    return CompanyRecord(
        cik=cik,
        name=name if isinstance(name, str) else "",
        sic=_get_str(payload, "sic"),
        sic_description=_get_str(payload, "sicDescription"),
        tickers=tickers,
    )


def _format_value(val: Any) -> str:
    """Render a fact value the way it appeared in the JSON."""
    if isinstance(val, str):
        return val
    if isinstance(val, Decimal):
        # Decimal keeps the JSON text of floats, e.g. "1.50" and "1E+10"
        return str(val)
    return json.dumps(val)


def _matches(entry: dict, year: int, period: str) -> bool:
    fy = entry.get("fy")
    fp = entry.get("fp")
    if isinstance(fy, bool) or not isinstance(fy, int):
        return False
    if not isinstance(fp, str):
        return False
    return fy == year and fp.upper() == period


def find_concept_value(payload: Any, concept: str, period: str, year: int) -> ConceptLookup:
    """
    Select the fact for one fiscal year and period from a concept document.

    Unit groups ("USD", "shares", ...) are scanned in document order and
    entries within a group in array order. The first matching entry wins and
    later groups are not consulted.
    """
    period = period.upper()
    units = payload.get("units") if isinstance(payload, dict) else None
    if not isinstance(units, dict):
        return ConceptLookup(
            status=StatementStatus.MISSING_UNITS,
            error="Units property not found in response",
        )

    for unit, entries in units.items():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict) or not _matches(entry, year, period):
                continue

            val = entry.get("val")
            return ConceptLookup(
                status=StatementStatus.FOUND if val is not None else StatementStatus.NULL_VALUE,
                value=_format_value(val) if val is not None else None,
                unit=unit,
                filed=_get_str(entry, "filed"),
                form=_get_str(entry, "form"),
            )

    return ConceptLookup(
        status=StatementStatus.NOT_FOUND,
        error=f"Concept {concept} not found for period {period} {year}",
    )


def decode_concept(
    body: bytes,
    concept: str,
    period: str,
    year: int,
    excerpt_limit: int = 1000,
) -> ConceptLookup:
    """
    Decode a (possibly truncated) companyconcept payload and look up a fact.

    Never raises. A payload that does not parse as JSON yields a MALFORMED
    lookup carrying at most ``excerpt_limit`` characters of the raw bytes.
    """
    try:
        payload = json.loads(body, parse_float=Decimal)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        return ConceptLookup(
            status=StatementStatus.MALFORMED,
            error=f"JSON parsing error: {e}",
            partial_data=excerpt(body, excerpt_limit),
        )
    return find_concept_value(payload, concept, period, year)
