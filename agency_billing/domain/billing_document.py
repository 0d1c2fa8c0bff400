"""Billing Document Domain Entity

A proposal or an invoice: the billable unit bearing line items, totals
and a status lifecycle.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Date, UniqueConstraint
from agency_billing.domain.base import BaseModel, generate_uuid


class DocumentKind(str, Enum):
    """Billing document kinds"""
    PROPOSAL = "proposal"
    INVOICE = "invoice"


class ProposalStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    VOID = "void"


EDITABLE_STATUS = "draft"

STATUS_ENUMS = {
    DocumentKind.PROPOSAL: ProposalStatus,
    DocumentKind.INVOICE: InvoiceStatus,
}

ALLOWED_TRANSITIONS: Dict[DocumentKind, Dict[str, FrozenSet[str]]] = {
    DocumentKind.PROPOSAL: {
        "draft": frozenset({"sent"}),
        "sent": frozenset({"viewed", "approved", "rejected"}),
        "viewed": frozenset({"approved", "rejected"}),
        "approved": frozenset(),
        "rejected": frozenset(),
    },
    DocumentKind.INVOICE: {
        "draft": frozenset({"sent", "void"}),
        "sent": frozenset({"paid", "overdue", "void"}),
        "overdue": frozenset({"paid", "void"}),
        "paid": frozenset(),
        "void": frozenset(),
    },
}

# Statuses counted against the monthly plan quota
BILLABLE_STATUSES: Dict[DocumentKind, FrozenSet[str]] = {
    DocumentKind.PROPOSAL: frozenset({"sent", "viewed", "approved", "rejected"}),
    DocumentKind.INVOICE: frozenset({"sent", "paid", "overdue"}),
}


class BillingDocument(BaseModel, table=True):
    """
    Billing Document - Proposal or invoice owned by a tenant

    Domain Rules:
    - document_number is unique per tenant (e.g., INV-2024-0001)
    - total == subtotal + tax_amount, subtotal == sum of item line totals
    - Items and totals are mutable only while status is draft
    - Status changes follow ALLOWED_TRANSITIONS for the document kind
    - Deleting a document cascades to its items and payments
    """

    __tablename__ = "billing_documents"
    __table_args__ = (
        UniqueConstraint("tenant_id", "document_number", name="uq_documents_tenant_number"),
        Index("ix_documents_tenant_kind_status", "tenant_id", "kind", "status"),
        Index("ix_documents_created_at", "created_at"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique document identifier (uuid)"
    )

    tenant_id: str = Field(
        index=True,
        description="Owning tenant (agency) ID"
    )

    kind: DocumentKind = Field(
        description="Document kind (proposal, invoice)"
    )

    status: str = Field(
        default=EDITABLE_STATUS,
        sa_column=Column(String(20), nullable=False, default=EDITABLE_STATUS),
        description="Lifecycle status, values depend on kind"
    )

    document_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Human-readable number (e.g., INV-2024-0001)"
    )

    client_id: Optional[str] = Field(
        default=None,
        description="Client the document is addressed to"
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Document title"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, default="USD"),
        description="Currency code (ISO 4217)"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 4), nullable=False, default=0),
        description="Tax rate snapshot in [0, 1) (e.g., 0.2000 for 20%)"
    )

    subtotal: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Sum of rounded line totals"
    )

    tax_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Tax added on top of the subtotal"
    )

    total: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="subtotal + tax_amount"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Payment due date (invoices)"
    )

    converted_to_document_id: Optional[str] = Field(
        default=None,
        description="Invoice created from this proposal, if converted"
    )

    sent_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the document was sent"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the invoice was marked paid"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Document creation timestamp (UTC)"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp (UTC)"
    )

    def is_editable(self) -> bool:
        return self.status == EDITABLE_STATUS

    def can_transition_to(self, status: str) -> bool:
        allowed = ALLOWED_TRANSITIONS[DocumentKind(self.kind)].get(self.status, frozenset())
        return status in allowed

    def issue_date(self) -> date:
        """Date used by reports: when sent, else when created"""
        return (self.sent_at or self.created_at).date()


def parse_status(kind: DocumentKind, value: str) -> Optional[str]:
    """Return the canonical status value for kind, or None if unknown"""
    try:
        return STATUS_ENUMS[DocumentKind(kind)](value).value
    except ValueError:
        return None
