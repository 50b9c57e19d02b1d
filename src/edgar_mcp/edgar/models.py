"""Records returned by the EDGAR registry client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ARCHIVES_URL = "https://www.sec.gov/Archives/edgar/data"


def normalize_cik(cik: str | int) -> str:
    """
    Normalize a CIK to 10 digits with leading zeros.

    Raises:
        ValueError: If the CIK is blank or not numeric
    """
    cik_str = str(cik).strip()
    if not cik_str.isdigit():
        raise ValueError(f"CIK must be numeric, got {cik!r}")
    return cik_str.zfill(10)


def filing_document_url(cik: str, accession_number: str, document: str) -> str:
    """Build the archive URL of a filing's primary document."""
    accession_clean = accession_number.replace("-", "")
    return f"{ARCHIVES_URL}/{cik}/{accession_clean}/{document}"


@dataclass(frozen=True)
class CompanyRecord:
    """A registered filer."""

    cik: str  # 10 digits, zero padded
    name: str
    sic: str | None = None
    sic_description: str | None = None
    tickers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cik": self.cik,
            "name": self.name,
            "sic": self.sic,
            "sicDescription": self.sic_description,
            "tickers": list(self.tickers),
        }


@dataclass(frozen=True)
class FilingRecord:
    """A single submitted document."""

    accession_number: str  # "NNNNNNNNNN-NN-NNNNNN"
    filing_date: str  # "YYYY-MM-DD"
    form: str  # e.g. "10-K"
    primary_document: str
    primary_doc_url: str
    report_date: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "accessionNumber": self.accession_number,
            "filingDate": self.filing_date,
            "reportDate": self.report_date,
            "form": self.form,
            "primaryDocument": self.primary_document,
            "primaryDocUrl": self.primary_doc_url,
            "description": self.description,
        }


@dataclass(frozen=True)
class FilingCollection:
    """Filings of one company, newest first."""

    cik: str
    company_name: str
    filings: list[FilingRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cik": self.cik,
            "companyName": self.company_name,
            "filings": [f.to_dict() for f in self.filings],
        }


class StatementStatus(str, Enum):
    """Which branch produced a financial statement result."""

    FOUND = "found"
    NULL_VALUE = "null_value"
    NOT_FOUND = "not_found"
    MISSING_UNITS = "missing_units"
    MALFORMED = "malformed"
    EMPTY_RESPONSE = "empty_response"
    HTTP_ERROR = "http_error"
    REQUEST_ERROR = "request_error"
    TIMEOUT = "timeout"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    INVALID_INPUT = "invalid_input"
    UNEXPECTED_ERROR = "unexpected_error"

    @property
    def concept_found(self) -> bool:
        return self in (StatementStatus.FOUND, StatementStatus.NULL_VALUE)


@dataclass(frozen=True)
class FinancialStatementResult:
    """
    Outcome of a concept/period/year lookup.

    Always produced, even when the lookup failed. ``data`` holds the extracted
    value under the concept name plus diagnostic keys such as ``conceptFound``,
    ``error``, ``nullValue``, ``partialResponse`` and ``timeout``.
    """

    cik: str
    company_name: str
    form: str
    filing_date: str
    fiscal_year: int
    fiscal_period: str
    data: dict[str, Any]
    status: StatementStatus

    @property
    def concept_found(self) -> bool:
        return bool(self.data.get("conceptFound", False))

    @property
    def error(self) -> str | None:
        return self.data.get("error")

    def to_dict(self) -> dict[str, Any]:
        return {
            "cik": self.cik,
            "companyName": self.company_name,
            "form": self.form,
            "filingDate": self.filing_date,
            "fiscalYear": self.fiscal_year,
            "fiscalPeriod": self.fiscal_period,
            "data": dict(self.data),
            "status": self.status.value,
        }
