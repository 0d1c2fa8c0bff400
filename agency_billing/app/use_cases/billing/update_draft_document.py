"""UpdateDraftDocument Use Case

Edits a draft document: replaces its items and recomputes its totals.
"""

import logging
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.document_item_repository import DocumentItemRepository
from agency_billing.domain.money import LineItemError, compute_totals, validate_tax_rate
from .dtos import UpdateDocumentCommandDTO, DocumentResponseDTO
from .mappers import build_items, to_document_dto

logger = logging.getLogger(__name__)


class UpdateDraftDocument:
    """
    Use Case: Edit a draft document

    Business Rules:
    1. Only draft documents can be edited; this is checked before the payload
    2. Title is required and at least one item is required
    3. The full item set is replaced and totals recomputed in one transaction
    4. The tax rate is kept unless a new one is given
    5. Items naming a catalog service are priced from it when a catalog is given

    Flow:
    1. Load document with lock (SELECT FOR UPDATE)
    2. Check editable status
    3. Validate payload and compute totals
    4. Replace items, update document
    5. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: BillingDocumentRepository,
        item_repo: DocumentItemRepository,
        service_catalog=None,
    ):
        self.uow = uow
        self.document_repo = document_repo
        self.item_repo = item_repo
        self.service_catalog = service_catalog

    async def execute(self, command: UpdateDocumentCommandDTO) -> Result[DocumentResponseDTO]:
        try:
            # Step 1: Load document with lock
            document = await self.document_repo.get_by_id(
                command.tenant_id, command.document_id, for_update=True
            )
            if not document:
                return Return.err(
                    Error(
                        code=ErrorCode.DOCUMENT_NOT_FOUND,
                        message=f"Document with ID {command.document_id} not found",
                    )
                )

            # Step 2: Editable status
            if not document.is_editable():
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATE_TRANSITION,
                        message="Only draft documents can be edited",
                        reason=f"Current status: {document.status}",
                    )
                )

            # Step 3: Validate payload
            if not command.title or not command.title.strip():
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message="Document title is required",
                    )
                )

            line_items = command.items
            if self.service_catalog is not None:
                priced = await self.service_catalog.price_items(command.tenant_id, line_items)
                if priced.is_err():
                    return priced
                line_items = priced.value

            tax_rate = command.tax_rate if command.tax_rate is not None else document.tax_rate
            try:
                tax_rate = validate_tax_rate(tax_rate)
                totals = compute_totals(line_items, tax_rate)
            except LineItemError as e:
                return Return.err(
                    Error(code=ErrorCode.VALIDATION_ERROR, message=str(e))
                )

            # Step 4: Replace items and totals
            items = await self.item_repo.replace_for_document(
                document.id, build_items(document.id, line_items)
            )

            document.title = command.title.strip()
            document.notes = command.notes
            document.due_date = command.due_date
            document.tax_rate = tax_rate
            document.subtotal = totals.subtotal
            document.tax_amount = totals.tax_amount
            document.total = totals.total
            updated = await self.document_repo.update(document)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(f"Updated draft {updated.document_number} (total={updated.total})")

            return Return.ok(to_document_dto(updated, items))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_DOCUMENT_FAILED",
                    message="Failed to update document",
                    reason=str(e),
                )
            )
