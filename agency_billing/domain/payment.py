"""Payment Domain Entity

Payments recorded against invoices. Payment status is not stored:
it is derived from the sum of payments (see settlement.py).
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String
from agency_billing.domain.base import BaseModel, generate_uuid


class PaymentMethod(str, Enum):
    """Payment method types"""
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "PaymentMethod":
        """Unrecognized values become OTHER instead of being rejected"""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class Payment(BaseModel, table=True):
    """
    Payment - Amount received against a document

    Domain Rules:
    - amount > 0, stored rounded to 2 places
    - Sum of payments for a document never exceeds document.total
      (enforced at insert/update time with the document row locked)
    - external_reference is unique; used for processor idempotency
    - Deleting the document cascades to its payments
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="payment_amount_positive"),
        Index("ix_payments_document_id", "document_id"),
        Index("ix_payments_payment_date", "payment_date"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique payment identifier (uuid)"
    )

    document_id: str = Field(
        sa_column=Column(
            String(36), ForeignKey("billing_documents.id", ondelete="CASCADE"), nullable=False
        ),
        description="Foreign key to BillingDocument"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Payment amount (> 0, 2 decimal places)"
    )

    payment_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Date the payment was received"
    )

    method: PaymentMethod = Field(
        default=PaymentMethod.OTHER,
        description="Payment method (cash, bank_transfer, card, other)"
    )

    note: Optional[str] = Field(
        default=None,
        description="Optional note"
    )

    external_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
        description="Processor reference (e.g., checkout session id)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Record creation timestamp"
    )
