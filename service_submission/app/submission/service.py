"""
Rate-limited document submission.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional

from shared.config import SubmissionConfig
from shared.errors import (
    QuotaCancelledError,
    SubmissionClientException,
    SubmissionFailed,
    TransportError,
)
from shared.logging import get_logger, set_document_context, set_submission_id
from shared.metrics import MetricsCollector
from ..adapters.transport import HttpxTransport, OutboundRequest, SubmissionTransport
from ..documents.models import Document, SubmissionRequest
from ..ratelimit.quota_limiter import QuotaLimiter


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of one submit call."""
    success: bool
    status_code: Optional[int] = None
    body: Optional[str] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, status_code: int, body: str) -> "SubmissionOutcome":
        return cls(success=True, status_code=status_code, body=body)

    @classmethod
    def failed(cls, error: SubmissionClientException) -> "SubmissionOutcome":
        return cls(
            success=False,
            status_code=getattr(error, "status_code", None),
            body=getattr(error, "body", None),
            error_kind=error.code,
            message=error.message
        )


class SubmissionService:
    """Submits documents to the remote endpoint within the configured quota."""

    def __init__(self, api_url: str, limiter: QuotaLimiter, transport: SubmissionTransport,
                 metrics: Optional[MetricsCollector] = None):
        self.api_url = api_url
        self.limiter = limiter
        self.transport = transport
        self.metrics = metrics
        self.logger = get_logger("submission.service")
        self._owns_limiter = False
        self._owns_transport = False

    @classmethod
    def from_config(cls, config: SubmissionConfig,
                    transport: Optional[SubmissionTransport] = None,
                    metrics: Optional[MetricsCollector] = None) -> "SubmissionService":
        """Build a service that owns its limiter, and its transport unless one is given."""
        limiter = QuotaLimiter(
            config.request_limit,
            config.period_seconds,
            name=config.service_name,
            metrics=metrics
        )
        service = cls(
            config.api_url,
            limiter,
            transport or HttpxTransport(timeout=config.http_timeout_seconds),
            metrics=metrics
        )
        service._owns_limiter = True
        service._owns_transport = transport is None
        return service

    async def __aenter__(self) -> "SubmissionService":
        await self.limiter.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the limiter and transport when this service created them."""
        if self._owns_limiter:
            await self.limiter.close()
        if self._owns_transport:
            await self.transport.close()

    def build_request(self, document: Document, signature: str) -> OutboundRequest:
        """Serialize a document and attach the submission headers."""
        return OutboundRequest(
            url=self.api_url,
            headers={
                "Content-Type": "application/json",
                "Signature": signature,
            },
            body=document.to_json()
        )

    async def submit(self, document: Document, signature: str) -> SubmissionOutcome:
        """Submit one document, waiting for quota first.

        Raises SubmissionFailed for a non-success response, TransportError
        for any fault raised by the transport and QuotaCancelledError when
        the limiter shuts down while waiting. The permit is returned exactly
        once whatever happens after it was acquired.
        """
        set_submission_id()
        set_document_context(document.doc_id)

        # Serialize outside the quota so a bad document never holds a permit.
        request = self.build_request(document, signature)

        await self.limiter.acquire()
        started = time.monotonic()
        try:
            response = await self.transport.send(request)
        except TransportError as e:
            self._record("transport_error", started)
            self.logger.error("Failed to create document", error=e.message)
            raise
        except OSError as e:
            self._record("transport_error", started)
            self.logger.error("Failed to create document", error=str(e))
            raise TransportError(
                f"Request to {request.url} failed: {e}",
                details={"url": request.url, "error_type": type(e).__name__}
            ) from e
        except asyncio.CancelledError:
            self._record("cancelled", started)
            self.logger.warning("Submission cancelled in flight")
            raise
        except Exception as e:
            self._record("transport_error", started)
            self.logger.error("Submission transport error", error=str(e), error_type=type(e).__name__)
            raise TransportError(
                f"Transport error: {e}",
                details={"url": request.url, "error_type": type(e).__name__}
            ) from e
        finally:
            self.limiter.release()

        if not response.is_success:
            self._record("failed", started)
            self.logger.error(
                "Failed to create document",
                status_code=response.status_code,
                body=response.body
            )
            raise SubmissionFailed(response.status_code, response.body)

        self._record("success", started)
        self.logger.info("Document created successfully", status_code=response.status_code, body=response.body)
        return SubmissionOutcome.succeeded(response.status_code, response.body)

    async def submit_request(self, request: SubmissionRequest) -> SubmissionOutcome:
        """Submit a prepared SubmissionRequest."""
        return await self.submit(request.document, request.signature)

    async def submit_many(self, requests: Iterable[SubmissionRequest]) -> List[SubmissionOutcome]:
        """Submit several documents concurrently.

        Per-document failures become failure outcomes, returned in input
        order. If the batch is cancelled or one submission raises anything
        else, the remaining submissions are cancelled and awaited before
        the error propagates.
        """
        async def _one(request: SubmissionRequest) -> SubmissionOutcome:
            try:
                return await self.submit_request(request)
            except (SubmissionFailed, TransportError, QuotaCancelledError) as e:
                return SubmissionOutcome.failed(e)

        tasks = [asyncio.ensure_future(_one(request)) for request in requests]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _record(self, outcome: str, started: float):
        if self.metrics:
            self.metrics.record_submission(outcome, time.monotonic() - started)
