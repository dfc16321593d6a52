"""
Shared error handling for the document submission client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    submission_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class SubmissionClientException(Exception):
    """Base exception for the submission client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, submission_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            submission_id=submission_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigError(SubmissionClientException):
    """Invalid limiter parameters or settings."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_ERROR", message, details)


class QuotaCancelledError(SubmissionClientException):
    """Raised to callers waiting for quota when the limiter shuts down."""

    def __init__(self, message: str = "Quota limiter shut down", details: Optional[Dict[str, Any]] = None):
        super().__init__("CANCELLED", message, details)


class TransportError(SubmissionClientException):
    """Network or connection fault while sending a request."""

    def __init__(self, message: str = "Transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class SubmissionFailed(SubmissionClientException):
    """The remote endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = body
        merged = {"status_code": status_code, "body": body}
        merged.update(details or {})
        super().__init__("SUBMISSION_FAILED", f"Failed to create document: {body}", merged)
