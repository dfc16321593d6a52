"""Document models and samples."""

from .models import Description, Document, Product, SubmissionRequest

__all__ = ["Description", "Document", "Product", "SubmissionRequest"]
