"""CreateDocument Use Case

Creates a draft proposal or invoice with computed totals and a
document number.
"""

import logging
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.services.sequence_allocator import SequenceAllocator
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.document_item_repository import DocumentItemRepository
from agency_billing.domain.billing_document import BillingDocument, DocumentKind, EDITABLE_STATUS
from agency_billing.domain.money import (
    CurrencyError,
    LineItemError,
    compute_totals,
    normalize_currency,
    validate_tax_rate,
)
from .dtos import CreateDocumentCommandDTO, DocumentResponseDTO
from .mappers import build_items, to_document_dto

logger = logging.getLogger(__name__)


class CreateDocument:
    """
    Use Case: Create a draft document

    Business Rules:
    1. Title is required and at least one line item is required
    2. Quantities, unit prices and the tax rate are validated before anything is written
    3. Invoices are subject to the plan's monthly quota
    4. The document number comes from the tenant's counter for the kind
    5. Totals are computed with tax added on top of the subtotal
    6. Currency and tax rate default to the tenant settings; the currency must be a 3-letter code
    7. Items naming a catalog service are priced from it when a catalog is given

    Flow:
    1. Validate input, load tenant and compute totals
    2. Check plan limit
    3. Allocate document number
    4. Create document and items
    5. Commit transaction
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenant_repo: TenantRepository,
        document_repo: BillingDocumentRepository,
        item_repo: DocumentItemRepository,
        plan_limiter: PlanLimiter,
        sequence_allocator: SequenceAllocator,
        default_currency: str = "USD",
        service_catalog=None,
    ):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.document_repo = document_repo
        self.item_repo = item_repo
        self.plan_limiter = plan_limiter
        self.sequence_allocator = sequence_allocator
        self.default_currency = default_currency
        self.service_catalog = service_catalog

    async def execute(self, command: CreateDocumentCommandDTO) -> Result[DocumentResponseDTO]:
        """
        Execute document creation

        Args:
            command: CreateDocumentCommandDTO with tenant, kind, title and items

        Returns:
            Result[DocumentResponseDTO]: Created document or error
        """
        try:
            # Step 1: Validate input
            if not command.title or not command.title.strip():
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message="Document title is required",
                    )
                )

            tenant = await self.tenant_repo.get_by_id(command.tenant_id)
            if not tenant:
                return Return.err(
                    Error(
                        code=ErrorCode.TENANT_NOT_FOUND,
                        message=f"Tenant {command.tenant_id} not found",
                    )
                )

            line_items = command.items
            if self.service_catalog is not None:
                priced = await self.service_catalog.price_items(command.tenant_id, line_items)
                if priced.is_err():
                    return priced
                line_items = priced.value

            tax_rate = command.tax_rate if command.tax_rate is not None else tenant.default_tax_rate
            try:
                currency = normalize_currency(command.currency or tenant.currency or self.default_currency)
                tax_rate = validate_tax_rate(tax_rate)
                totals = compute_totals(line_items, tax_rate)
            except (CurrencyError, LineItemError) as e:
                return Return.err(
                    Error(code=ErrorCode.VALIDATION_ERROR, message=str(e))
                )

            # Step 2: Plan limit
            limit_result = await self.plan_limiter.check_and_reserve(
                command.tenant_id, command.kind
            )
            if limit_result.is_err():
                return limit_result

            # Step 3: Document number
            document_number = await self.sequence_allocator.next_number(
                command.tenant_id, command.kind
            )

            # Step 4: Create document with totals, then its items
            document = BillingDocument(
                tenant_id=command.tenant_id,
                kind=command.kind,
                status=EDITABLE_STATUS,
                document_number=document_number,
                client_id=command.client_id,
                title=command.title.strip(),
                currency=currency,
                tax_rate=tax_rate,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                total=totals.total,
                notes=command.notes,
                due_date=command.due_date,
            )
            created = await self.document_repo.create(document)
            items = await self.item_repo.create_many(build_items(created.id, line_items))

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created {DocumentKind(created.kind).value} "
                f"{created.document_number} for tenant {created.tenant_id} (total={created.total})"
            )

            # Step 6: Build response
            return Return.ok(to_document_dto(created, items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Document creation failed for tenant {command.tenant_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_DOCUMENT_FAILED",
                    message="Failed to create document",
                    reason=str(e),
                )
            )
