"""
Sample documents used by the demo entry point and tests.
"""

from datetime import date
from typing import Iterable, List, Optional

from .models import Description, Document, Product


def sample_product(**overrides) -> Product:
    """Create a filled-in product line."""
    values = dict(
        certificate_document="cert123",
        certificate_document_date=date(2024, 7, 15),
        certificate_document_number="certNumber",
        owner_inn="1234567890",
        producer_inn="1234567890",
        production_date=date(2024, 7, 18),
        tnved_code="123456",
        uit_code="uitCode123",
        uitu_code="uituCode123",
    )
    values.update(overrides)
    return Product(**values)


def sample_document(doc_id: str = "doc123", products: Optional[Iterable[Product]] = None, **overrides) -> Document:
    """Create a filled-in LP_INTRODUCE_GOODS document."""
    values = dict(
        description=Description(participant_inn="123456789"),
        doc_id=doc_id,
        doc_status="NEW",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        owner_inn="1234567891",
        participant_inn="0987654321",
        producer_inn="1234567896",
        production_date=date(2024, 7, 17),
        production_type="TYPE1",
        products=tuple(products) if products is not None else (sample_product(),),
        reg_date=date(2024, 7, 18),
        reg_number="reg123",
    )
    values.update(overrides)
    return Document(**values)


def sample_documents(count: int) -> List[Document]:
    """Create ``count`` sample documents with distinct ids."""
    return [sample_document(doc_id=f"doc{index:03d}") for index in range(1, count + 1)]
