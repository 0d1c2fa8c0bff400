"""RecordProcessorPayment Use Case

Privileged entry point for payments confirmed by the payment processor
(e.g., a completed card checkout). Records the payment and marks the
invoice paid in one transaction.
"""

import logging
from datetime import datetime
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.payment_repository import PaymentRepository
from agency_billing.domain.billing_document import InvoiceStatus
from agency_billing.domain.money import round2
from agency_billing.domain.payment import Payment, PaymentMethod
from agency_billing.domain.settlement import SettlementPolicy
from .dtos import ProcessorPaymentCommandDTO, PaymentResponseDTO
from .mappers import to_balance_dto, to_payment_dto
from .record_payment import get_tenant_invoice, invoice_not_found, payment_rejected

logger = logging.getLogger(__name__)


class RecordProcessorPayment:
    """
    Use Case: Record a processor-confirmed payment

    Business Rules:
    1. Idempotency: same external_reference returns the existing payment
    2. The no-overpayment rule still applies
    3. Payment method is card, dated today unless given
    4. The invoice status becomes paid in the same transaction; this
       processor-confirmed status takes precedence over derived settlement
    5. Void invoices cannot be paid
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

    async def execute(self, command: ProcessorPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        try:
            # Step 1: Get invoice with lock
            invoice = await get_tenant_invoice(
                self.document_repo, command.tenant_id, command.document_id, for_update=True
            )
            if not invoice:
                return Return.err(invoice_not_found(command.document_id))

            # Step 2: Idempotency
            existing = await self.payment_repo.get_by_external_reference(command.external_reference)
            if existing:
                if existing.document_id != invoice.id:
                    return Return.err(
                        Error(
                            code=ErrorCode.VALIDATION_ERROR,
                            message="external_reference already used for another invoice",
                        )
                    )
                paid = await self.payment_repo.sum_for_document(invoice.id)
                return Return.ok(
                    PaymentResponseDTO(
                        payment=to_payment_dto(existing),
                        balance=to_balance_dto(invoice, paid),
                    )
                )

            if invoice.status == InvoiceStatus.VOID.value:
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATE_TRANSITION,
                        message="Void invoices cannot be paid",
                    )
                )

            # Step 3: Balance check
            paid_so_far = await self.payment_repo.sum_for_document(invoice.id)
            rejection = SettlementPolicy.reject_payment(invoice.total, paid_so_far, command.amount)
            if rejection:
                balance_due = SettlementPolicy.balance_due(invoice.total, paid_so_far)
                logger.warning(
                    f"Processor payment {command.external_reference} rejected for "
                    f"{invoice.document_number}: {rejection.value} (amount={command.amount})"
                )
                return Return.err(payment_rejected(rejection, balance_due))

            # Step 4: Payment and paid status together
            now = datetime.utcnow()
            amount = round2(command.amount)
            payment = await self.payment_repo.create(
                Payment(
                    document_id=invoice.id,
                    amount=amount,
                    payment_date=command.payment_date or now.date(),
                    method=PaymentMethod.CARD,
                    note=f"Processor payment - {command.external_reference}",
                    external_reference=command.external_reference,
                )
            )

            invoice.status = InvoiceStatus.PAID.value
            invoice.paid_at = now
            invoice = await self.document_repo.update(invoice)

            await self.uow.commit()

            logger.info(
                f"Processor payment {command.external_reference} recorded; "
                f"{invoice.document_number} marked paid"
            )

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
                    code="RECORD_PROCESSOR_PAYMENT_FAILED",
                    message="Failed to record processor payment",
                    reason=str(e),
                )
            )
