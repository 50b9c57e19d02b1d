"""Deadline-bounded streaming fetch for large EDGAR documents."""

import asyncio
import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """What a streaming fetch produced before it finished or ran out of time."""

    url: str
    status_code: int | None = None
    reason: str = ""
    body: bytes = b""
    timed_out: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


class StreamingFetcher:
    """
    Fetch a URL within a hard deadline, keeping whatever arrived in time.

    companyconcept documents can run to megabytes and data.sec.gov is
    sometimes slow to deliver them. The body is accumulated chunk by chunk
    into a buffer that outlives the deadline, so a transfer cut short still
    hands back the bytes received so far.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = 30.0) -> None:
        self.client = client
        self.timeout = timeout

    async def _read(self, url: str, buffer: bytearray, result: FetchResult) -> None:
        async with self.client.stream("GET", url) as response:
            result.status_code = response.status_code
            result.reason = response.reason_phrase
            if not result.ok:
                return
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                logger.debug("Read %d bytes so far from %s", len(buffer), url)

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch ``url``, never raising for upstream failures.

        Returns:
            FetchResult with the status, the buffered body, and either
            ``timed_out`` or ``error`` set when the transfer did not complete
        """
        result = FetchResult(url=url)
        buffer = bytearray()

        try:
            await asyncio.wait_for(self._read(url, buffer, result), timeout=self.timeout)
            logger.debug("Read all %d bytes from %s", len(buffer), url)
        except asyncio.TimeoutError:
            logger.warning(
                "Timed out after %.1fs fetching %s with %d bytes buffered",
                self.timeout,
                url,
                len(buffer),
            )
            result.timed_out = True
        except httpx.RequestError as e:
            logger.warning("Request error fetching %s: %s", url, e)
            result.error = str(e) or type(e).__name__

        result.body = bytes(buffer)
        return result
