"""Document Item Domain Entity

Line items of a proposal or invoice.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Integer, Numeric, String
from agency_billing.domain.base import BaseModel, generate_uuid


class DocumentItem(BaseModel, table=True):
    """
    Document Item - Individual line item within a billing document

    Domain Rules:
    - Each item belongs to exactly one document and is never shared
    - line_total = round2(quantity * unit_price)
    - quantity and unit_price are non-negative, stored with 4 decimal places
    - The item set is replaced wholesale when a draft is edited
    """

    __tablename__ = "document_items"
    __table_args__ = (
        Index("ix_document_items_document_id", "document_id"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique item identifier (uuid)"
    )

    document_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("billing_documents.id", ondelete="CASCADE"), nullable=False
        ),
        description="Foreign key to BillingDocument"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Order of the item within the document"
    )

    service_id: Optional[str] = Field(
        default=None,
        description="Catalog service the item was priced from, if any"
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Item title (e.g., 'Website redesign')"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional item description"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(12, 4), nullable=False),
        description="Quantity (hours, units, ...)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(12, 4), nullable=False),
        description="Price per unit"
    )

    line_total: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="round2(quantity * unit_price)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Item creation timestamp"
    )
