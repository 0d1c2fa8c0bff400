"""Request schemas for Payment and Subscription API"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /documents/{document_id}/payments endpoint.
    """

    amount: Decimal = Field(
        ...,
        description="Payment amount (must be > 0)"
    )

    payment_date: Optional[date] = Field(
        default=None,
        description="Date the payment was received (required)"
    )

    method: Optional[str] = Field(
        default=None,
        description="cash, bank_transfer, card or other"
    )

    note: Optional[str] = Field(
        default=None,
        description="Optional note"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "30.00",
                "payment_date": "2024-02-01",
                "method": "bank_transfer",
                "note": "Deposit"
            }
        }


class UpdatePaymentRequestSchema(BaseModel):
    """
    Request schema for PATCH /payments/{payment_id}

    Only the fields present in the body are changed.
    """

    amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    method: Optional[str] = None
    note: Optional[str] = None


class ProcessorPaymentRequestSchema(BaseModel):
    """
    Request schema for a processor-confirmed payment

    Used for POST /processor/payments by the payment processor integration.
    """

    document_id: str = Field(
        ...,
        min_length=1,
        description="Invoice that was paid"
    )

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount captured (must be > 0)"
    )

    external_reference: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Processor reference (e.g., checkout session id)"
    )

    payment_date: Optional[date] = Field(
        default=None,
        description="Capture date; defaults to today"
    )


class SyncPlanRequestSchema(BaseModel):
    """Request schema for PUT /subscription/plan"""

    plan_key: str = Field(
        ...,
        min_length=1,
        description="freelancer, starter, growth or scale"
    )

    subscription_status: Optional[str] = Field(
        default=None,
        description="Processor subscription status (e.g., active)"
    )
