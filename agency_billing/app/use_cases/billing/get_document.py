"""GetDocument and ListDocuments Use Cases

Read-only access to a tenant's proposals and invoices.
"""

from typing import Optional
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.document_item_repository import DocumentItemRepository
from agency_billing.domain.billing_document import DocumentKind
from .dtos import DocumentResponseDTO, ListDocumentsResponseDTO
from .mappers import to_document_dto


class GetDocument:
    """Use Case: Fetch one document with its items"""

    def __init__(
        self,
        document_repo: BillingDocumentRepository,
        item_repo: DocumentItemRepository,
    ):
        self.document_repo = document_repo
        self.item_repo = item_repo

    async def execute(self, tenant_id: str, document_id: str) -> Result[DocumentResponseDTO]:
        try:
            document = await self.document_repo.get_by_id(tenant_id, document_id)
            if not document:
                return Return.err(
                    Error(
                        code=ErrorCode.DOCUMENT_NOT_FOUND,
                        message=f"Document with ID {document_id} not found",
                    )
                )

            items = await self.item_repo.get_by_document_id(document.id)
            return Return.ok(to_document_dto(document, items))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_DOCUMENT_FAILED",
                    message="Failed to retrieve document",
                    reason=str(e),
                )
            )


class ListDocuments:
    """Use Case: List a tenant's documents (without items), newest first"""

    def __init__(self, document_repo: BillingDocumentRepository):
        self.document_repo = document_repo

    async def execute(
        self,
        tenant_id: str,
        kind: Optional[DocumentKind] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListDocumentsResponseDTO]:
        try:
            documents = await self.document_repo.list_by_tenant(
                tenant_id, kind=kind, status=status, limit=limit, offset=offset
            )
            return Return.ok(
                ListDocumentsResponseDTO(
                    documents=[to_document_dto(d) for d in documents],
                    limit=limit,
                    offset=offset,
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_DOCUMENTS_FAILED",
                    message="Failed to list documents",
                    reason=str(e),
                )
            )
