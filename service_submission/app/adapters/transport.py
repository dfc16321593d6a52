"""
Transports that deliver serialized submissions to the remote endpoint.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from shared.errors import TransportError
from shared.logging import get_logger


@dataclass(frozen=True)
class OutboundRequest:
    """A fully serialized request, ready to send."""
    url: str
    headers: Dict[str, str]
    body: str


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body returned by the endpoint."""
    status_code: int
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class SubmissionTransport(ABC):
    """Sends one request and returns the response.

    Implementations raise TransportError for network or connection
    faults; any HTTP status, including errors, is a normal response.
    """

    @abstractmethod
    async def send(self, request: OutboundRequest) -> TransportResponse:
        ...

    async def close(self):
        """Release transport resources."""


class HttpxTransport(SubmissionTransport):
    """Transport backed by httpx.AsyncClient."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self.logger = get_logger("submission.transport")
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def send(self, request: OutboundRequest) -> TransportResponse:
        client = self._get_client()
        try:
            response = await client.post(
                request.url,
                content=request.body.encode("utf-8"),
                headers=request.headers
            )
        except httpx.HTTPError as e:
            self.logger.error("Submission transport error", url=request.url, error=str(e))
            raise TransportError(
                f"Request to {request.url} failed: {e}",
                details={"url": request.url, "error_type": type(e).__name__}
            ) from e

        return TransportResponse(status_code=response.status_code, body=response.text)

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None


@dataclass
class StaticTransport(SubmissionTransport):
    """In-memory transport answering every request with the same response.

    Records what was sent; used for dry runs and tests.
    """
    status_code: int = 200
    body: str = '{"status": "dry-run"}'
    delay: float = 0.0
    sent: List[OutboundRequest] = field(default_factory=list)

    async def send(self, request: OutboundRequest) -> TransportResponse:
        self.sent.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return TransportResponse(status_code=self.status_code, body=self.body)
