"""Configuration management for the EDGAR MCP server."""

import logging
import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

USER_AGENT_ENV = "EDGAR_API_USER_AGENT"
CONFIG_PATH_ENV = "EDGAR_MCP_CONFIG"
DEFAULT_USER_AGENT = "EdgarMcpServer/1.0.0 (AI Assistant; contact-email@example.com)"


def _get_user_agent() -> str:
    """Get User-Agent for SEC EDGAR. SEC asks for contact info in it."""
    user_agent = os.environ.get(USER_AGENT_ENV, "").strip()
    if not user_agent:
        logger.warning(
            "%s is not set, falling back to placeholder User-Agent %r. "
            "SEC EDGAR expects a name and contact email, e.g. "
            "export %s='Jane Doe jane@example.com'",
            USER_AGENT_ENV,
            DEFAULT_USER_AGENT,
            USER_AGENT_ENV,
        )
        return DEFAULT_USER_AGENT
    return user_agent


@dataclass
class Config:
    """Application configuration."""

    # SEC EDGAR settings
    user_agent: str = field(default_factory=_get_user_agent)
    tickers_url: str = "https://www.sec.gov/files/company_tickers.json"
    submissions_url: str = "https://data.sec.gov/submissions"
    concept_url: str = "https://data.sec.gov/api/xbrl/companyconcept"
    taxonomy: str = "us-gaap"

    # Pacing: one request in flight, then a fixed pause (SEC ceiling is 10/s)
    request_cooldown: float = 0.1

    # Deadlines in seconds
    http_timeout: float = 30.0
    concept_timeout: float = 30.0
    name_lookup_timeout: float = 5.0
    statement_timeout: float = 15.0

    # Max characters of a malformed payload echoed back in diagnostics
    excerpt_limit: int = 1000

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for name in ("request_cooldown", "http_timeout", "concept_timeout",
                     "name_lookup_timeout", "statement_timeout"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.excerpt_limit <= 0:
            raise ValueError("excerpt_limit must be positive")


def load_config(path: str | Path | None = None) -> Config:
    """
    Load configuration, applying overrides from an optional YAML file.

    Args:
        path: YAML file to read. Defaults to $EDGAR_MCP_CONFIG when set.

    Returns:
        Config with file overrides applied

    Raises:
        ValueError: If the file contains unknown keys or is not a mapping
    """
    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV) or None
    if path is None:
        return Config()

    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    return Config(**data)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout is reserved for the MCP stream."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def get_config() -> Config:
    """Get the default configuration."""
    return Config()
