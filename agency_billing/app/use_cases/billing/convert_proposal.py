"""ConvertProposalToInvoice Use Case

Creates a draft invoice from an approved proposal.
"""

import logging
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.services.sequence_allocator import SequenceAllocator
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.document_item_repository import DocumentItemRepository
from agency_billing.domain.billing_document import (
    BillingDocument,
    DocumentKind,
    ProposalStatus,
    EDITABLE_STATUS,
)
from agency_billing.domain.document_item import DocumentItem
from agency_billing.domain.money import compute_totals
from .dtos import DocumentResponseDTO
from .mappers import to_document_dto

logger = logging.getLogger(__name__)


class ConvertProposalToInvoice:
    """
    Use Case: Convert an approved proposal into a draft invoice

    Business Rules:
    1. Only approved proposals can be converted
    2. A proposal converts at most once
    3. The new invoice counts against the plan quota and gets an invoice number
    4. Items, currency, tax rate and notes are copied; totals are recomputed
    5. Invoice creation and the proposal link are committed together

    Flow:
    1. Load proposal with lock
    2. Validate status and conversion link
    3. Check plan limit, allocate invoice number
    4. Create invoice and copy items
    5. Link proposal to invoice
    6. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: BillingDocumentRepository,
        item_repo: DocumentItemRepository,
        plan_limiter: PlanLimiter,
        sequence_allocator: SequenceAllocator,
    ):
        self.uow = uow
        self.document_repo = document_repo
        self.item_repo = item_repo
        self.plan_limiter = plan_limiter
        self.sequence_allocator = sequence_allocator

    async def execute(self, tenant_id: str, proposal_id: str) -> Result[DocumentResponseDTO]:
        try:
            # Step 1: Load proposal with lock
            proposal = await self.document_repo.get_by_id(tenant_id, proposal_id, for_update=True)
            if not proposal or DocumentKind(proposal.kind) != DocumentKind.PROPOSAL:
                return Return.err(
                    Error(
                        code=ErrorCode.DOCUMENT_NOT_FOUND,
                        message=f"Proposal with ID {proposal_id} not found",
                    )
                )

            # Step 2: Status and conversion link
            if proposal.status != ProposalStatus.APPROVED.value:
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATE_TRANSITION,
                        message="Only approved proposals can be converted to invoices",
                        reason=f"Current status: {proposal.status}",
                    )
                )

            if proposal.converted_to_document_id:
                return Return.err(
                    Error(
                        code=ErrorCode.ALREADY_CONVERTED,
                        message="This proposal has already been converted to an invoice",
                        details={"invoice_id": proposal.converted_to_document_id},
                    )
                )

            # Step 3: Plan limit and number
            limit_result = await self.plan_limiter.check_and_reserve(tenant_id, DocumentKind.INVOICE)
            if limit_result.is_err():
                return limit_result

            invoice_number = await self.sequence_allocator.next_number(tenant_id, DocumentKind.INVOICE)

            # Step 4: Invoice with copied items
            source_items = await self.item_repo.get_by_document_id(proposal.id)
            totals = compute_totals(source_items, proposal.tax_rate)

            invoice = await self.document_repo.create(
                BillingDocument(
                    tenant_id=tenant_id,
                    kind=DocumentKind.INVOICE,
                    status=EDITABLE_STATUS,
                    document_number=invoice_number,
                    client_id=proposal.client_id,
                    title=proposal.title,
                    currency=proposal.currency,
                    tax_rate=proposal.tax_rate,
                    subtotal=totals.subtotal,
                    tax_amount=totals.tax_amount,
                    total=totals.total,
                    notes=proposal.notes,
                )
            )
            items = await self.item_repo.create_many([
                DocumentItem(
                    document_id=invoice.id,
                    position=item.position,
                    service_id=item.service_id,
                    title=item.title,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in source_items
            ])

            # Step 5: Link proposal
            proposal.converted_to_document_id = invoice.id
            await self.document_repo.update(proposal)

            # Step 6: Commit transaction
            await self.uow.commit()

            logger.info(f"Converted proposal {proposal.document_number} to invoice {invoice.document_number}")

            return Return.ok(to_document_dto(invoice, items))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CONVERT_PROPOSAL_FAILED",
                    message="Failed to convert proposal to invoice",
                    reason=str(e),
                )
            )
