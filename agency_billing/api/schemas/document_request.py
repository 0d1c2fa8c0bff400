"""Request schemas for Document API

Pydantic models for validating incoming HTTP requests. They check shape
and types; business rules (non-empty items, non-negative prices, tax
rate range) are checked by the use cases so that state errors such as
editing a sent invoice take precedence.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from agency_billing.domain.billing_document import DocumentKind
from agency_billing.domain.money import normalize_currency


class LineItemSchema(BaseModel):
    service_id: Optional[str] = Field(
        default=None,
        description="Catalog service to price the item from"
    )

    title: str = Field(
        default="",
        max_length=255,
        description="Item title"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional item description"
    )

    quantity: Decimal = Field(
        default=Decimal("1"),
        description="Quantity (must be >= 0)"
    )

    unit_price: Optional[Decimal] = Field(
        default=None,
        description="Price per unit (must be >= 0); defaults to the service price"
    )


class CreateDocumentRequestSchema(BaseModel):
    """
    Request schema for creating a proposal or invoice

    Used for POST /documents endpoint.
    """

    kind: DocumentKind = Field(
        ...,
        description="proposal or invoice"
    )

    title: str = Field(
        default="",
        max_length=255,
        description="Document title (required, non-blank)"
    )

    client_id: Optional[str] = Field(
        default=None,
        description="Client identifier"
    )

    currency: Optional[str] = Field(
        default=None,
        description="ISO 4217 currency code; defaults to the agency currency"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        description="Tax rate in [0, 1); defaults to the agency default rate"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    items: List[LineItemSchema] = Field(
        default_factory=list,
        description="Line items (at least one)"
    )

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        """Three-letter ISO 4217 code, stored upper-case"""
        if v is None:
            return v
        return normalize_currency(v)

    class Config:
        json_schema_extra = {
            "example": {
                "kind": "invoice",
                "title": "Website redesign",
                "client_id": "client_123",
                "currency": "USD",
                "tax_rate": "0.20",
                "due_date": "2024-03-01",
                "items": [
                    {"title": "Design", "quantity": "2", "unit_price": "50.00"}
                ]
            }
        }


class UpdateDocumentRequestSchema(BaseModel):
    """
    Request schema for editing a draft

    Used for PUT /documents/{document_id}. Replaces title, notes,
    due date and the whole item set.
    """

    title: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Document title (required, non-blank)"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        description="Tax rate in [0, 1); keeps the current rate when omitted"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    items: List[LineItemSchema] = Field(
        default_factory=list,
        description="Replacement line items (at least one)"
    )


class TransitionStatusRequestSchema(BaseModel):
    """Request schema for POST /documents/{document_id}/status"""

    status: str = Field(
        ...,
        min_length=1,
        description="Target status (e.g., sent, approved, paid, void)"
    )
