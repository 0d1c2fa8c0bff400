"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.

Command DTOs deliberately carry no business constraints (non-negative
prices, non-empty items, ...): the use cases check those so that state
checks such as "only drafts can be edited" take precedence.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from agency_billing.domain.billing_document import DocumentKind


class LineItemDTO(BaseModel):
    """Line item as submitted by the caller"""

    service_id: Optional[str] = Field(
        default=None,
        description="Catalog service; fills a blank title, description and price"
    )

    title: str = Field(
        default="",
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
        description="Price per unit (must be >= 0); required unless a service gives it"
    )


class CreateDocumentCommandDTO(BaseModel):
    """
    Command DTO for creating a proposal or invoice

    Used as input to CreateDocument use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    kind: DocumentKind = Field(
        ...,
        description="Document kind (proposal, invoice)"
    )

    title: str = Field(
        ...,
        description="Document title"
    )

    client_id: Optional[str] = Field(
        default=None,
        description="Client identifier"
    )

    currency: Optional[str] = Field(
        default=None,
        description="ISO 4217 code; defaults to the tenant currency"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        description="Tax rate in [0, 1); defaults to the tenant default rate"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    items: List[LineItemDTO] = Field(
        default_factory=list,
        description="Line items (at least one)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_xyz789",
                "kind": "invoice",
                "title": "Website redesign",
                "client_id": "client_123",
                "currency": "EUR",
                "tax_rate": "0.20",
                "items": [
                    {"title": "Design", "quantity": "10", "unit_price": "50.00"}
                ]
            }
        }


class UpdateDocumentCommandDTO(BaseModel):
    """
    Command DTO for editing a draft document

    Used as input to UpdateDraftDocument use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    document_id: str = Field(
        ...,
        description="Document to edit"
    )

    title: Optional[str] = Field(
        default=None,
        description="New title (required, non-blank)"
    )

    tax_rate: Optional[Decimal] = Field(
        default=None,
        description="New tax rate; keeps the current rate when omitted"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    items: List[LineItemDTO] = Field(
        default_factory=list,
        description="Replacement item set (at least one)"
    )


class TransitionStatusCommandDTO(BaseModel):
    """Command DTO for moving a document to another status"""

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    document_id: str = Field(
        ...,
        description="Document identifier"
    )

    status: str = Field(
        ...,
        description="Target status (e.g., sent, approved, void)"
    )


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a manual payment

    Used as input to RecordPayment use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    document_id: str = Field(
        ...,
        description="Invoice the payment is applied to"
    )

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
        description="cash, bank_transfer, card or other; unknown values become other"
    )

    note: Optional[str] = Field(
        default=None,
        description="Optional note"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_xyz789",
                "document_id": "3f0c2a4e-0d7a-4f4b-9c57-0a4d8d1f6b11",
                "amount": "30.00",
                "payment_date": "2024-02-01",
                "method": "bank_transfer",
                "note": "Deposit"
            }
        }


class UpdatePaymentCommandDTO(BaseModel):
    """
    Command DTO for editing a payment

    Only the fields explicitly set are applied (see model_fields_set).
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    payment_id: str = Field(
        ...,
        description="Payment identifier"
    )

    amount: Optional[Decimal] = Field(
        default=None,
        description="New amount (> 0, within the balance excluding this payment)"
    )

    payment_date: Optional[date] = Field(
        default=None,
        description="New payment date"
    )

    method: Optional[str] = Field(
        default=None,
        description="New method; unknown values become other"
    )

    note: Optional[str] = Field(
        default=None,
        description="New note (null clears it)"
    )


class ProcessorPaymentCommandDTO(BaseModel):
    """
    Command DTO for a payment confirmed by the payment processor

    Used as input to RecordProcessorPayment use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    document_id: str = Field(
        ...,
        description="Invoice that was paid"
    )

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount captured by the processor"
    )

    external_reference: str = Field(
        ...,
        min_length=1,
        description="Processor reference (e.g., checkout session id); idempotency key"
    )

    payment_date: Optional[date] = Field(
        default=None,
        description="Capture date; defaults to today (UTC)"
    )


class SyncSubscriptionPlanCommandDTO(BaseModel):
    """Command DTO for a plan change reported by the payment processor"""

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    plan_key: str = Field(
        ...,
        description="New plan key (freelancer, starter, growth, scale)"
    )

    subscription_status: Optional[str] = Field(
        default=None,
        description="Processor subscription status (e.g., active, past_due)"
    )


class ReportQueryDTO(BaseModel):
    """Date-range query for reports"""

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    start_date: date = Field(
        ...,
        description="Inclusive start date"
    )

    end_date: date = Field(
        ...,
        description="Inclusive end date"
    )


class DocumentItemDTO(BaseModel):
    """Stored line item"""

    id: str
    service_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal


class DocumentResponseDTO(BaseModel):
    """
    Response DTO for document operations

    Returned by CreateDocument, UpdateDraftDocument, GetDocument, etc.
    """

    document_id: str = Field(
        ...,
        description="Document ID"
    )

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    kind: str = Field(
        ...,
        description="proposal or invoice"
    )

    status: str = Field(
        ...,
        description="Current status"
    )

    document_number: str = Field(
        ...,
        description="Human-readable number"
    )

    client_id: Optional[str] = None
    title: str
    currency: str
    tax_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    notes: Optional[str] = None
    due_date: Optional[date] = None
    converted_to_document_id: Optional[str] = None
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    items: List[DocumentItemDTO] = Field(
        default_factory=list,
        description="Line items in position order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "document_id": "3f0c2a4e-0d7a-4f4b-9c57-0a4d8d1f6b11",
                "tenant_id": "tenant_xyz789",
                "kind": "invoice",
                "status": "draft",
                "document_number": "INV-2024-0001",
                "title": "Website redesign",
                "currency": "USD",
                "tax_rate": "0.2000",
                "subtotal": "100.00",
                "tax_amount": "20.00",
                "total": "120.00",
                "created_at": "2024-01-31T00:00:00Z",
                "updated_at": "2024-01-31T00:00:00Z",
                "items": [
                    {
                        "id": "b7d1...",
                        "title": "Design",
                        "quantity": "2.00",
                        "unit_price": "50.00",
                        "line_total": "100.00"
                    }
                ]
            }
        }


class ListDocumentsResponseDTO(BaseModel):
    """Response DTO for document listing"""

    documents: List[DocumentResponseDTO]
    limit: int
    offset: int


class PaymentDTO(BaseModel):
    """Stored payment"""

    payment_id: str
    document_id: str
    amount: Decimal
    payment_date: date
    method: str
    note: Optional[str] = None
    external_reference: Optional[str] = None
    created_at: datetime


class DocumentBalanceDTO(BaseModel):
    """
    Settlement view of a document

    Returned by GetDocumentBalance and alongside payment operations.
    """

    document_id: str = Field(
        ...,
        description="Document ID"
    )

    currency: str = Field(
        ...,
        description="Document currency"
    )

    total: Decimal = Field(
        ...,
        description="Stored document total"
    )

    paid_amount: Decimal = Field(
        ...,
        description="Sum of recorded payments"
    )

    balance_due: Decimal = Field(
        ...,
        description="max(0, total - paid_amount)"
    )

    is_settled: bool = Field(
        ...,
        description="paid_amount >= total, or processor-confirmed paid status"
    )

    settlement_status: str = Field(
        ...,
        description="unpaid, partially_paid or paid"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "document_id": "3f0c2a4e-0d7a-4f4b-9c57-0a4d8d1f6b11",
                "currency": "USD",
                "total": "100.00",
                "paid_amount": "30.00",
                "balance_due": "70.00",
                "is_settled": False,
                "settlement_status": "partially_paid"
            }
        }


class PaymentResponseDTO(BaseModel):
    """Response DTO for RecordPayment, UpdatePayment and RecordProcessorPayment"""

    payment: PaymentDTO
    balance: DocumentBalanceDTO


class ListPaymentsResponseDTO(BaseModel):
    """Response DTO for ListPayments"""

    document_id: str
    payments: List[PaymentDTO]


class PlanUsageResponseDTO(BaseModel):
    """Response DTO for GetPlanUsage"""

    plan_key: str = Field(
        ...,
        description="Effective plan key"
    )

    used: int = Field(
        ...,
        description="Billable invoices created this month"
    )

    limit: Optional[int] = Field(
        default=None,
        description="Monthly limit (null = unlimited)"
    )

    at_limit: bool = Field(
        ...,
        description="True when no more invoices may be created this month"
    )


class TenantPlanResponseDTO(BaseModel):
    """Response DTO for SyncSubscriptionPlan"""

    tenant_id: str
    plan_key: str
    subscription_status: Optional[str] = None
    monthly_document_limit: Optional[int] = None


class TaxReportResponseDTO(BaseModel):
    """Response DTO for GetTaxReport"""

    start_date: date
    end_date: date
    currency: str

    tax_invoiced: Decimal = Field(
        ...,
        description="Tax contained in invoices issued in the period"
    )

    tax_collected: Decimal = Field(
        ...,
        description="Tax share of payments received in the period"
    )


class StatusBucketDTO(BaseModel):
    count: int = 0
    total_amount: Decimal = Decimal("0.00")


class InvoiceStatusReportDTO(BaseModel):
    """Response DTO for GetInvoiceStatusReport"""

    start_date: date
    end_date: date
    unpaid: StatusBucketDTO
    partially_paid: StatusBucketDTO
    paid: StatusBucketDTO


class PaymentReportQueryDTO(ReportQueryDTO):
    """Date-range query for the payments report"""

    method: Optional[str] = Field(
        default=None,
        description="Only payments with this method; unknown methods are ignored"
    )


class PaymentReportRowDTO(BaseModel):
    payment_id: str
    payment_date: date
    document_id: str
    document_number: str
    client_id: Optional[str] = None
    amount: Decimal
    method: str
    note: Optional[str] = None


class PaymentReportDTO(BaseModel):
    """Response DTO for GetPaymentsReport"""

    start_date: date
    end_date: date
    payments: List[PaymentReportRowDTO] = Field(
        default_factory=list,
        description="Payments in the period, newest first"
    )

    total_collected: Decimal = Field(
        ...,
        description="Sum of the listed payments"
    )

    breakdown_by_method: Dict[str, Decimal] = Field(
        default_factory=dict,
        description="total_collected split by payment method"
    )


class RevenueRange(str, Enum):
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    CUSTOM = "custom"


class RevenueOverviewQueryDTO(BaseModel):
    """Query for GetRevenueOverview; dates are required for a custom range"""

    tenant_id: str
    range: RevenueRange = RevenueRange.THIS_MONTH
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class RevenueOverviewDTO(BaseModel):
    """Response DTO for GetRevenueOverview"""

    start_date: date
    end_date: date
    currency: str

    total_invoiced: Decimal = Field(
        ...,
        description="Totals of invoices issued in the period"
    )

    total_collected: Decimal = Field(
        ...,
        description="Payments received in the period"
    )

    outstanding: Decimal = Field(
        ...,
        description="Balance still due on all issued invoices, whenever issued"
    )


class CreateServiceCommandDTO(BaseModel):
    """Command DTO for adding a service to the price list"""

    tenant_id: str
    name: str = ""
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    unit_type: Optional[str] = None
    currency: Optional[str] = None


class UpdateServiceCommandDTO(BaseModel):
    """
    Command DTO for editing a service

    Only the fields explicitly set are applied (see model_fields_set).
    """

    tenant_id: str
    service_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    unit_type: Optional[str] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None


class ServiceDTO(BaseModel):
    """Catalog service"""

    service_id: str
    name: str
    description: Optional[str] = None
    default_unit_price: Decimal
    unit_type: str
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "service_id": "5b2e9a60-3c1f-4d8e-a7a4-2f1c9e6b0d21",
                "name": "Logo design",
                "description": "Three concepts, two revision rounds",
                "default_unit_price": "450.0000",
                "unit_type": "project",
                "currency": "USD",
                "is_active": True,
                "created_at": "2024-01-31T00:00:00Z",
                "updated_at": "2024-01-31T00:00:00Z"
            }
        }


class ListServicesResponseDTO(BaseModel):
    services: List[ServiceDTO]
