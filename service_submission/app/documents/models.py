"""
Document data models for the submission service.

Field aliases are the wire names expected by the documents/create
endpoint and must not change.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Description(_WireModel):
    """Document description block."""
    participant_inn: Optional[str] = Field(None, alias="participantInn", description="Participant INN")


class Product(_WireModel):
    """One line item of a document."""
    certificate_document: Optional[str] = Field(None, alias="certificate_document")
    certificate_document_date: Optional[date] = Field(None, alias="certificate_document_date")
    certificate_document_number: Optional[str] = Field(None, alias="certificate_document_number")
    owner_inn: Optional[str] = Field(None, alias="owner_inn")
    producer_inn: Optional[str] = Field(None, alias="producer_inn")
    production_date: Optional[date] = Field(None, alias="production_date")
    tnved_code: Optional[str] = Field(None, alias="tnved_code", description="Commodity nomenclature code")
    uit_code: Optional[str] = Field(None, alias="uit_code")
    uitu_code: Optional[str] = Field(None, alias="uitu_code")


class Document(_WireModel):
    """Document introducing goods into circulation."""
    description: Optional[Description] = Field(None, alias="description")
    doc_id: Optional[str] = Field(None, alias="doc_id")
    doc_status: Optional[str] = Field(None, alias="doc_status")
    doc_type: Optional[str] = Field(None, alias="doc_type")
    import_request: bool = Field(False, alias="importRequest")
    owner_inn: Optional[str] = Field(None, alias="owner_inn")
    participant_inn: Optional[str] = Field(None, alias="participant_inn")
    producer_inn: Optional[str] = Field(None, alias="producer_inn")
    production_date: Optional[date] = Field(None, alias="production_date")
    production_type: Optional[str] = Field(None, alias="production_type")
    products: Tuple[Product, ...] = Field(default_factory=tuple, alias="products")
    reg_date: Optional[date] = Field(None, alias="reg_date")
    reg_number: Optional[str] = Field(None, alias="reg_number")

    def to_json(self) -> str:
        """Serialize using the endpoint's field names."""
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class SubmissionRequest:
    """A document plus the caller-supplied signature for it."""
    document: Document
    signature: str
