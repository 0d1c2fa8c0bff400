"""ListPayments and GetDocumentBalance Use Cases"""

from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.payment_repository import PaymentRepository
from .dtos import DocumentBalanceDTO, ListPaymentsResponseDTO
from .mappers import to_balance_dto, to_payment_dto
from .record_payment import get_tenant_invoice, invoice_not_found


class ListPayments:
    """Use Case: List an invoice's payments, oldest payment_date first"""

    def __init__(
        self,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
    ):
        self.document_repo = document_repo
        self.payment_repo = payment_repo

    async def execute(self, tenant_id: str, document_id: str) -> Result[ListPaymentsResponseDTO]:
        try:
            invoice = await get_tenant_invoice(self.document_repo, tenant_id, document_id)
            if not invoice:
                return Return.err(invoice_not_found(document_id))

            payments = await self.payment_repo.list_by_document(invoice.id)
            return Return.ok(
                ListPaymentsResponseDTO(
                    document_id=invoice.id,
                    payments=[to_payment_dto(p) for p in payments],
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_PAYMENTS_FAILED",
                    message="Failed to list payments",
                    reason=str(e),
                )
            )


class GetDocumentBalance:
    """
    Use Case: Settlement view of an invoice

    Business Rules:
    1. paid_amount = sum of payments
    2. balance_due = max(0, total - paid_amount)
    3. is_settled when paid_amount >= total or the invoice status is paid
    """

    def __init__(
        self,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
    ):
        self.document_repo = document_repo
        self.payment_repo = payment_repo

    async def execute(self, tenant_id: str, document_id: str) -> Result[DocumentBalanceDTO]:
        try:
            invoice = await get_tenant_invoice(self.document_repo, tenant_id, document_id)
            if not invoice:
                return Return.err(invoice_not_found(document_id))

            paid = await self.payment_repo.sum_for_document(invoice.id)
            return Return.ok(to_balance_dto(invoice, paid))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_BALANCE_FAILED",
                    message="Failed to compute balance",
                    reason=str(e),
                )
            )
