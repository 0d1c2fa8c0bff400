"""Entity to DTO conversions shared by the billing use cases"""

from decimal import Decimal
from typing import List, Optional

from agency_billing.domain.billing_document import BillingDocument, DocumentKind
from agency_billing.domain.document_item import DocumentItem
from agency_billing.domain.money import line_total
from agency_billing.domain.payment import Payment, PaymentMethod
from agency_billing.domain.settlement import SettlementPolicy
from .dtos import (
    DocumentBalanceDTO,
    DocumentItemDTO,
    DocumentResponseDTO,
    LineItemDTO,
    PaymentDTO,
)


def build_items(document_id: str, items: List[LineItemDTO]) -> List[DocumentItem]:
    """Turn submitted line items into entities, in submission order"""
    return [
        DocumentItem(
            document_id=document_id,
            position=position,
            service_id=item.service_id,
            title=(item.title or "").strip(),
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=line_total(item.quantity, item.unit_price),
        )
        for position, item in enumerate(items)
    ]


def to_document_dto(
    document: BillingDocument, items: Optional[List[DocumentItem]] = None
) -> DocumentResponseDTO:
    return DocumentResponseDTO(
        document_id=document.id,
        tenant_id=document.tenant_id,
        kind=DocumentKind(document.kind).value,
        status=document.status,
        document_number=document.document_number,
        client_id=document.client_id,
        title=document.title,
        currency=document.currency,
        tax_rate=document.tax_rate,
        subtotal=document.subtotal,
        tax_amount=document.tax_amount,
        total=document.total,
        notes=document.notes,
        due_date=document.due_date,
        converted_to_document_id=document.converted_to_document_id,
        sent_at=document.sent_at,
        paid_at=document.paid_at,
        created_at=document.created_at,
        updated_at=document.updated_at,
        items=[
            DocumentItemDTO(
                id=item.id,
                service_id=item.service_id,
                title=item.title,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in items or []
        ],
    )


def to_payment_dto(payment: Payment) -> PaymentDTO:
    return PaymentDTO(
        payment_id=payment.id,
        document_id=payment.document_id,
        amount=payment.amount,
        payment_date=payment.payment_date,
        method=PaymentMethod(payment.method).value,
        note=payment.note,
        external_reference=payment.external_reference,
        created_at=payment.created_at,
    )


def to_balance_dto(document: BillingDocument, paid_amount: Decimal) -> DocumentBalanceDTO:
    return DocumentBalanceDTO(
        document_id=document.id,
        currency=document.currency,
        total=document.total,
        paid_amount=paid_amount,
        balance_due=SettlementPolicy.balance_due(document.total, paid_amount),
        is_settled=SettlementPolicy.is_settled(document, paid_amount),
        settlement_status=SettlementPolicy.status(document, paid_amount).value,
    )
