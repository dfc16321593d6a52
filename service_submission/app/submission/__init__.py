from .service import SubmissionOutcome, SubmissionService

__all__ = ["SubmissionOutcome", "SubmissionService"]
