"""TransitionDocumentStatus Use Case

Moves a proposal or invoice along its status lifecycle.
"""

import logging
from datetime import datetime
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.domain.billing_document import DocumentKind, InvoiceStatus, parse_status
from .dtos import TransitionStatusCommandDTO, DocumentResponseDTO
from .mappers import to_document_dto

logger = logging.getLogger(__name__)


class TransitionDocumentStatus:
    """
    Use Case: Change document status

    Business Rules:
    1. The target must be a status of the document's kind
    2. The move must be allowed by the kind's lifecycle
       (e.g., draft -> sent, sent -> approved, sent -> paid)
    3. sent_at is stamped on -> sent, paid_at on -> paid
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: BillingDocumentRepository,
    ):
        self.uow = uow
        self.document_repo = document_repo

    async def execute(self, command: TransitionStatusCommandDTO) -> Result[DocumentResponseDTO]:
        try:
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

            kind = DocumentKind(document.kind)
            target = parse_status(kind, command.status)
            if target is None:
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message=f"Unknown {kind.value} status: {command.status}",
                    )
                )

            if not document.can_transition_to(target):
                return Return.err(
                    Error(
                        code=ErrorCode.INVALID_STATE_TRANSITION,
                        message=f"Cannot change {kind.value} status from {document.status} to {target}",
                    )
                )

            previous = document.status
            now = datetime.utcnow()
            document.status = target
            if target == "sent":
                document.sent_at = now
            if kind == DocumentKind.INVOICE and target == InvoiceStatus.PAID.value:
                document.paid_at = now

            updated = await self.document_repo.update(document)
            await self.uow.commit()

            logger.info(f"{updated.document_number}: {previous} -> {target}")

            return Return.ok(to_document_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="TRANSITION_STATUS_FAILED",
                    message="Failed to change document status",
                    reason=str(e),
                )
            )
