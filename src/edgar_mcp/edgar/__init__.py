"""SEC EDGAR registry access: pacing, streaming fetch and decoding."""

from .client import EdgarClient
from .models import (
    CompanyRecord,
    FilingCollection,
    FilingRecord,
    FinancialStatementResult,
    StatementStatus,
    normalize_cik,
)
from .rate_limit import RateLimiter
from .streaming import StreamingFetcher

__all__ = [
    "CompanyRecord",
    "EdgarClient",
    "FilingCollection",
    "FilingRecord",
    "FinancialStatementResult",
    "RateLimiter",
    "StatementStatus",
    "StreamingFetcher",
    "normalize_cik",
]
