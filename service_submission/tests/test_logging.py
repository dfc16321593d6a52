"""
Unit tests for the shared logging processors.
"""

from shared.logging import (
    add_correlation_context,
    add_service_context,
    clear_context,
    set_document_context,
    set_submission_id,
)
from shared.errors import ErrorResponse, SubmissionFailed


class TestLoggingProcessors:
    """Test cases for structlog processors."""

    def teardown_method(self):
        clear_context()

    def test_service_derived_from_logger_name(self):
        event = add_service_context(None, "info", {"logger": "submission.quota_limiter.default"})

        assert event["service"] == "submission"

    def test_correlation_context_added(self):
        submission_id = set_submission_id()
        set_document_context("doc123")

        event = add_correlation_context(None, "info", {"event": "Document created successfully"})

        assert event["submission_id"] == submission_id
        assert event["doc_id"] == "doc123"

    def test_document_context_replaced_by_none(self):
        set_document_context("doc123")
        set_document_context(None)

        event = add_correlation_context(None, "info", {})

        assert "doc_id" not in event

    def test_no_context_after_clear(self):
        set_submission_id("fixed-id")
        clear_context()

        event = add_correlation_context(None, "info", {})

        assert "submission_id" not in event
        assert "doc_id" not in event


class TestErrorResponse:
    """Test cases for error responses."""

    def test_submission_failed_response(self):
        response = SubmissionFailed(500, "bad request").to_response(submission_id="abc")

        assert isinstance(response, ErrorResponse)
        assert response.code == "SUBMISSION_FAILED"
        assert response.submission_id == "abc"
        assert response.details == {"status_code": 500, "body": "bad request"}
