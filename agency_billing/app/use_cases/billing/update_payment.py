"""UpdatePayment and DeletePayment Use Cases"""

import logging
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.payment_repository import PaymentRepository
from agency_billing.domain.money import round2
from agency_billing.domain.payment import PaymentMethod
from agency_billing.domain.settlement import SettlementPolicy
from .dtos import UpdatePaymentCommandDTO, PaymentResponseDTO, DocumentBalanceDTO
from .mappers import to_balance_dto, to_payment_dto
from .record_payment import get_tenant_invoice, payment_rejected

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("amount", "payment_date", "method", "note")


def payment_not_found(payment_id: str) -> Error:
    return Error(
        code=ErrorCode.PAYMENT_NOT_FOUND,
        message=f"Payment with ID {payment_id} not found",
    )


class UpdatePayment:
    """
    Use Case: Edit a recorded payment

    Business Rules:
    1. Payment must belong to an invoice of the tenant
    2. At least one of amount, payment_date, method, note must be given
    3. A new amount must be > 0 and fit the balance computed without this
       payment (so the sum of payments never exceeds the total)
    4. payment_date cannot be cleared

    Flow:
    1. Load payment, then its invoice with lock
    2. Validate fields
    3. Check amount against balance excluding this payment
    4. Apply changes and commit
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

    async def execute(self, command: UpdatePaymentCommandDTO) -> Result[PaymentResponseDTO]:
        try:
            # Step 1: Payment and locked invoice
            payment = await self.payment_repo.get_by_id(command.payment_id)
            if not payment:
                return Return.err(payment_not_found(command.payment_id))

            invoice = await get_tenant_invoice(
                self.document_repo, command.tenant_id, payment.document_id, for_update=True
            )
            if not invoice:
                return Return.err(payment_not_found(command.payment_id))

            # Step 2: Validate fields
            fields = [f for f in UPDATABLE_FIELDS if f in command.model_fields_set]
            if not fields:
                return Return.err(
                    Error(code=ErrorCode.VALIDATION_ERROR, message="No fields to update")
                )

            if "amount" in fields and (command.amount is None or command.amount <= 0):
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message="amount must be a number greater than 0",
                    )
                )

            if "payment_date" in fields and command.payment_date is None:
                return Return.err(
                    Error(code=ErrorCode.VALIDATION_ERROR, message="payment_date is required")
                )

            # Step 3: Balance excluding this payment
            others = await self.payment_repo.sum_for_document(
                invoice.id, exclude_payment_id=payment.id
            )
            if "amount" in fields:
                rejection = SettlementPolicy.reject_payment(invoice.total, others, command.amount)
                if rejection:
                    balance_due = SettlementPolicy.balance_due(invoice.total, others)
                    logger.warning(
                        f"Payment update rejected for {invoice.document_number}: "
                        f"{rejection.value} (amount={command.amount})"
                    )
                    return Return.err(payment_rejected(rejection, balance_due))
                payment.amount = round2(command.amount)

            # Step 4: Apply
            if "payment_date" in fields:
                payment.payment_date = command.payment_date
            if "method" in fields:
                payment.method = PaymentMethod.coerce(command.method)
            if "note" in fields:
                payment.note = command.note

            updated = await self.payment_repo.update(payment)
            await self.uow.commit()

            logger.info(f"Updated payment {updated.id} on {invoice.document_number} ({', '.join(fields)})")

            return Return.ok(
                PaymentResponseDTO(
                    payment=to_payment_dto(updated),
                    balance=to_balance_dto(invoice, others + updated.amount),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_PAYMENT_FAILED",
                    message="Failed to update payment",
                    reason=str(e),
                )
            )


class DeletePayment:
    """
    Use Case: Remove a recorded payment

    The invoice status is left as is; the balance is derived again from
    the remaining payments.
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

    async def execute(self, tenant_id: str, payment_id: str) -> Result[DocumentBalanceDTO]:
        try:
            payment = await self.payment_repo.get_by_id(payment_id)
            if not payment:
                return Return.err(payment_not_found(payment_id))

            invoice = await get_tenant_invoice(
                self.document_repo, tenant_id, payment.document_id, for_update=True
            )
            if not invoice:
                return Return.err(payment_not_found(payment_id))

            await self.payment_repo.delete(payment)
            remaining = await self.payment_repo.sum_for_document(invoice.id)
            await self.uow.commit()

            logger.info(f"Deleted payment {payment_id} from {invoice.document_number}")

            return Return.ok(to_balance_dto(invoice, remaining))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_PAYMENT_FAILED",
                    message="Failed to delete payment",
                    reason=str(e),
                )
            )
