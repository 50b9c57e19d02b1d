"""Shared fixtures: canned EDGAR payloads and clients wired to a mock transport."""

import json

import httpx
import pytest

from edgar_mcp.config import Config
from edgar_mcp.edgar.client import EdgarClient

TICKER_INDEX = {
    "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
    "1": {"cik_str": 789019, "ticker": "MSFT", "title": "MICROSOFT CORP"},
    "2": {"cik_str": 1652044, "ticker": "GOOGL", "title": "Alphabet Inc."},
    "3": {"cik_str": 1652044, "ticker": "GOOG", "title": "Alphabet Inc."},
}

APPLE_SUBMISSIONS = {
    "cik": "320193",
    "name": "Apple Inc.",
    "sic": "3571",
    "sicDescription": "Electronic Computers",
    "tickers": ["AAPL"],
    "filings": {
        "recent": {
            "accessionNumber": [
                "0000320193-23-000106",
                "0000320193-23-000077",
                "0000320193-23-000064",
                "0000320193-22-000108",
            ],
            "filingDate": ["2023-11-03", "2023-08-04", "2023-05-05", "2022-10-28"],
            "reportDate": ["2023-09-30", "2023-07-01", "2023-04-01", "2022-09-24"],
            "form": ["10-K", "10-Q", "8-K", "10-K"],
            "primaryDocument": [
                "aapl-20230930.htm",
                "aapl-20230701.htm",
                "aapl-20230505.htm",
                "aapl-20220924.htm",
            ],
            "description": ["10-K", "10-Q", "8-K", "10-K"],
        }
    },
}

NET_INCOME_CONCEPT = {
    "cik": 320193,
    "taxonomy": "us-gaap",
    "tag": "NetIncomeLoss",
    "entityName": "Apple Inc.",
    "units": {
        "USD": [
            {"end": "2022-09-24", "val": 99803000000, "fy": 2022, "fp": "FY",
             "form": "10-K", "filed": "2022-10-28"},
            {"end": "2023-07-01", "val": 19881000000, "fy": 2023, "fp": "Q3",
             "form": "10-Q", "filed": "2023-08-04"},
            {"end": "2023-09-30", "val": 96995000000, "fy": 2023, "fp": "FY",
             "form": "10-K", "filed": "2023-11-03"},
        ]
    },
}


def make_config(**overrides) -> Config:
    settings = {
        "user_agent": "Test Suite test@example.com",
        "request_cooldown": 0.0,
    }
    settings.update(overrides)
    return Config(**settings)


def serve_json(payload, status_code: int = 200):
    """Route target answering every request with ``payload`` as JSON."""

    def respond(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())

    return respond


def route(routes: dict):
    """Build a MockTransport handler dispatching on URL path; unknown paths 404."""

    async def handler(request: httpx.Request) -> httpx.Response:
        respond = routes.get(request.url.path)
        if respond is None:
            return httpx.Response(404, content=b"Not Found")
        response = respond(request)
        if hasattr(response, "__await__"):
            response = await response
        return response

    return handler


def make_client(handler, **overrides) -> EdgarClient:
    return EdgarClient(make_config(**overrides), transport=httpx.MockTransport(handler))


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def edgar_routes() -> dict:
    """Routes for a healthy upstream serving Apple's data."""
    return {
        "/files/company_tickers.json": serve_json(TICKER_INDEX),
        "/submissions/CIK0000320193.json": serve_json(APPLE_SUBMISSIONS),
        "/api/xbrl/companyconcept/CIK0000320193/us-gaap/NetIncomeLoss.json":
            serve_json(NET_INCOME_CONCEPT),
    }
