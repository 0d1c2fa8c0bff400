"""RecordPayment Use Case

Records a manual payment against an invoice without ever letting the sum
of payments exceed the invoice total.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.payment_repository import PaymentRepository
from agency_billing.domain.billing_document import BillingDocument, DocumentKind
from agency_billing.domain.money import round2
from agency_billing.domain.payment import Payment, PaymentMethod
from agency_billing.domain.settlement import PaymentRejection, SettlementPolicy
from .dtos import RecordPaymentCommandDTO, PaymentResponseDTO
from .mappers import to_balance_dto, to_payment_dto

logger = logging.getLogger(__name__)


async def get_tenant_invoice(
    document_repo: BillingDocumentRepository,
    tenant_id: str,
    document_id: str,
    for_update: bool = False,
) -> Optional[BillingDocument]:
    """Invoice owned by tenant; proposals and foreign documents are treated as missing"""
    document = await document_repo.get_by_id(tenant_id, document_id, for_update=for_update)
    if not document or DocumentKind(document.kind) != DocumentKind.INVOICE:
        return None
    return document


def invoice_not_found(document_id: str) -> Error:
    return Error(
        code=ErrorCode.DOCUMENT_NOT_FOUND,
        message=f"Invoice with ID {document_id} not found",
        reason="Invoice does not exist or belongs to another tenant",
    )


def payment_rejected(rejection: PaymentRejection, balance_due: Decimal) -> Error:
    if rejection == PaymentRejection.ALREADY_SETTLED:
        return Error(
            code=ErrorCode.ALREADY_SETTLED,
            message="Invoice is already fully paid",
            details={"balance_due": str(balance_due)},
        )
    return Error(
        code=ErrorCode.EXCEEDS_BALANCE,
        message=f"Payment exceeds balance due ({balance_due:.2f})",
        details={"balance_due": str(balance_due)},
    )


class RecordPayment:
    """
    Use Case: Record a payment against an invoice

    Business Rules:
    1. Invoice must exist and belong to the tenant
    2. amount > 0 and payment_date is required
    3. balance_due = max(0, total - paid so far); no payment when it is 0
    4. round2(amount) must not exceed balance_due
    5. Unrecognized methods are stored as 'other'
    6. Document status is not changed; settlement is derived at read time
    7. Steps 3-4 run with the invoice row locked (SELECT FOR UPDATE)

    Flow:
    1. Get invoice with lock
    2. Validate input
    3. Compute paid so far and balance due
    4. Validate against balance
    5. Insert payment
    6. Commit transaction
    7. Return payment with updated balance
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
    ):
        self.uow = uow
        self.document_repo = document_repo
        self.payment_repo = payment_repo

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO with invoice, amount and date

        Returns:
            Result[PaymentResponseDTO]: Created payment and balance, or error
        """
        try:
            # Step 1: Get invoice with lock
            invoice = await get_tenant_invoice(
                self.document_repo, command.tenant_id, command.document_id, for_update=True
            )
            if not invoice:
                return Return.err(invoice_not_found(command.document_id))

            # Step 2: Validate input
            if command.amount is None or command.amount <= 0:
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message="amount must be a number greater than 0",
                    )
                )
            if not isinstance(command.payment_date, date):
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message="payment_date is required",
                    )
                )

            # Step 3: Paid so far and balance
            paid_so_far = await self.payment_repo.sum_for_document(invoice.id)
            balance_due = SettlementPolicy.balance_due(invoice.total, paid_so_far)

            # Step 4: Validate against balance
            rejection = SettlementPolicy.reject_payment(invoice.total, paid_so_far, command.amount)
            if rejection:
                logger.warning(
                    f"Payment rejected for {invoice.document_number}: {rejection.value} "
                    f"(amount={command.amount}, balance_due={balance_due})"
                )
                return Return.err(payment_rejected(rejection, balance_due))

            # Step 5: Insert payment
            amount = round2(command.amount)
            payment = await self.payment_repo.create(
                Payment(
                    document_id=invoice.id,
                    amount=amount,
                    payment_date=command.payment_date,
                    method=PaymentMethod.coerce(command.method),
                    note=command.note,
                )
            )

            # Step 6: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Recorded payment of {amount} {invoice.currency} for {invoice.document_number}"
            )

            # Step 7: Build response
            return Return.ok(
                PaymentResponseDTO(
                    payment=to_payment_dto(payment),
                    balance=to_balance_dto(invoice, paid_so_far + amount),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to add payment",
                    reason=str(e),
                )
            )
