"""Document API Routes

FastAPI routes for proposals and invoices.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from agency_billing.api.schemas.document_request import (
    CreateDocumentRequestSchema,
    UpdateDocumentRequestSchema,
    TransitionStatusRequestSchema,
)
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.services.sequence_allocator import SequenceAllocator
from agency_billing.app.services.service_catalog import ServiceCatalog
from agency_billing.app.use_cases.billing.dtos import (
    CreateDocumentCommandDTO,
    UpdateDocumentCommandDTO,
    TransitionStatusCommandDTO,
    LineItemDTO,
    DocumentResponseDTO,
    ListDocumentsResponseDTO,
    DocumentBalanceDTO,
)
from agency_billing.app.use_cases.billing.create_document import CreateDocument
from agency_billing.app.use_cases.billing.update_draft_document import UpdateDraftDocument
from agency_billing.app.use_cases.billing.get_document import GetDocument, ListDocuments
from agency_billing.app.use_cases.billing.transition_document_status import TransitionDocumentStatus
from agency_billing.app.use_cases.billing.convert_proposal import ConvertProposalToInvoice
from agency_billing.app.use_cases.billing.list_payments import GetDocumentBalance
from agency_billing.adapter.repositories.billing_document_repository import SqlAlchemyBillingDocumentRepository
from agency_billing.adapter.repositories.catalog_service_repository import SqlAlchemyCatalogServiceRepository
from agency_billing.adapter.repositories.document_item_repository import SqlAlchemyDocumentItemRepository
from agency_billing.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from agency_billing.adapter.repositories.sequence_counter_repository import SqlAlchemySequenceCounterRepository
from agency_billing.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from agency_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agency_billing.depends import get_session, get_tenant_id, DOCUMENT_NUMBER_PREFIXES
from agency_billing.domain.billing_document import DocumentKind
from agency_billing.api.error import client_error

router = APIRouter(prefix="/documents", tags=["Documents"])


def _error_example(code: str, message: str) -> dict:
    return {"application/json": {"example": {"error": {"code": code, "message": message}}}}


def _limiter_and_allocator(session: AsyncSession):
    document_repo = SqlAlchemyBillingDocumentRepository(session)
    plan_limiter = PlanLimiter(SqlAlchemyTenantRepository(session), document_repo)
    allocator = SequenceAllocator(
        SqlAlchemySequenceCounterRepository(session), prefixes=DOCUMENT_NUMBER_PREFIXES
    )
    return plan_limiter, allocator


def _line_items(items) -> list:
    return [LineItemDTO(**item.model_dump()) for item in items]


@router.post(
    "",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": _error_example("VALIDATION_ERROR", "Add at least one item"),
        },
        403: {
            "description": "Monthly plan limit reached",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "LIMIT_REACHED",
                            "message": "Monthly invoice limit reached (10)",
                            "limit": 10
                        }
                    }
                }
            }
        },
        404: {
            "description": "Tenant not found",
            "content": _error_example("TENANT_NOT_FOUND", "Tenant tenant_xyz789 not found"),
        },
    }
)
async def create_document(
    request: CreateDocumentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Create a draft proposal or invoice.

    Totals are computed from the line items: each line is rounded to cents,
    tax is added on top of the subtotal. Invoices count against the monthly
    plan quota and receive the next number from the agency's counter
    (e.g., INV-2024-0001).

    **Request body:**
    - `kind` (required): proposal or invoice
    - `title` (required): Document title
    - `items` (required): At least one line item; an item with `service_id`
      takes the service name, description and price it leaves blank
    - `tax_rate` (optional): Defaults to the agency default rate
    - `currency` (optional): 3-letter code, defaults to the agency currency

    **Returns:**
    - 201: Document created
    - 400: Invalid items, title or tax rate
    - 403: Monthly invoice limit reached
    - 404: Unknown tenant
    """
    # Create UnitOfWork and repositories
    uow = SqlAlchemyUnitOfWork(session)
    plan_limiter, allocator = _limiter_and_allocator(session)

    command = CreateDocumentCommandDTO(
        tenant_id=tenant_id,
        kind=request.kind,
        title=request.title,
        client_id=request.client_id,
        currency=request.currency,
        tax_rate=request.tax_rate,
        due_date=request.due_date,
        notes=request.notes,
        items=_line_items(request.items),
    )

    use_case = CreateDocument(
        uow,
        SqlAlchemyTenantRepository(session),
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyDocumentItemRepository(session),
        plan_limiter,
        allocator,
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
        service_catalog=ServiceCatalog(SqlAlchemyCatalogServiceRepository(session)),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=ListDocumentsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_documents(
    kind: Optional[DocumentKind] = Query(None, description="proposal or invoice"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    limit: int = Query(20, ge=1, le=100, description="Number of documents to return"),
    offset: int = Query(0, ge=0, description="Number of documents to skip"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    List the agency's documents, newest first, without line items.

    **Query parameters:**
    - `kind` (optional): proposal or invoice
    - `status` (optional): e.g. draft, sent, paid
    - `limit` (optional): 1-100, default 20
    - `offset` (optional): default 0
    """
    use_case = ListDocuments(SqlAlchemyBillingDocumentRepository(session))
    result = await use_case.execute(
        tenant_id, kind=kind, status=status_filter, limit=limit, offset=offset
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/{document_id}",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Document not found",
            "content": _error_example("DOCUMENT_NOT_FOUND", "Document with ID ... not found"),
        }
    }
)
async def get_document(
    document_id: str,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """Get a document with its line items in position order."""
    use_case = GetDocument(
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyDocumentItemRepository(session),
    )
    result = await use_case.execute(tenant_id, document_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.put(
    "/{document_id}",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Validation error",
            "content": _error_example("VALIDATION_ERROR", "Document title is required"),
        },
        404: {
            "description": "Document not found",
            "content": _error_example("DOCUMENT_NOT_FOUND", "Document with ID ... not found"),
        },
        409: {
            "description": "Document is no longer a draft",
            "content": _error_example("INVALID_STATE_TRANSITION", "Only draft documents can be edited"),
        },
    }
)
async def update_document(
    document_id: str,
    request: UpdateDocumentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Edit a draft document.

    The item set is replaced as a whole and totals are recomputed in the
    same transaction. Documents that have left draft cannot be edited.

    **Returns:**
    - 200: Updated document
    - 400: Invalid title, items or tax rate
    - 404: Unknown document
    - 409: Document is not a draft
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdateDocumentCommandDTO(
        tenant_id=tenant_id,
        document_id=document_id,
        title=request.title,
        tax_rate=request.tax_rate,
        due_date=request.due_date,
        notes=request.notes,
        items=_line_items(request.items),
    )

    use_case = UpdateDraftDocument(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyDocumentItemRepository(session),
        service_catalog=ServiceCatalog(SqlAlchemyCatalogServiceRepository(session)),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/{document_id}/status",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Transition not allowed",
            "content": _error_example(
                "INVALID_STATE_TRANSITION", "Cannot change invoice status from draft to paid"
            ),
        }
    }
)
async def transition_status(
    document_id: str,
    request: TransitionStatusRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Move a document along its lifecycle.

    **Proposals:** draft -> sent -> viewed -> approved | rejected

    **Invoices:** draft -> sent | void, sent -> paid | overdue | void,
    overdue -> paid | void
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = TransitionStatusCommandDTO(
        tenant_id=tenant_id,
        document_id=document_id,
        status=request.status,
    )

    use_case = TransitionDocumentStatus(uow, SqlAlchemyBillingDocumentRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/{document_id}/convert",
    response_model=DocumentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {
            "description": "Monthly plan limit reached",
            "content": _error_example("LIMIT_REACHED", "Monthly invoice limit reached (10)"),
        },
        409: {
            "description": "Proposal not approved or already converted",
            "content": _error_example(
                "ALREADY_CONVERTED", "This proposal has already been converted to an invoice"
            ),
        },
    }
)
async def convert_proposal(
    document_id: str,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Convert an approved proposal into a draft invoice.

    Items are copied, totals recomputed, and the proposal is linked to the
    new invoice. A proposal can be converted once.
    """
    uow = SqlAlchemyUnitOfWork(session)
    plan_limiter, allocator = _limiter_and_allocator(session)

    use_case = ConvertProposalToInvoice(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyDocumentItemRepository(session),
        plan_limiter,
        allocator,
    )
    result = await use_case.execute(tenant_id, document_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/{document_id}/balance",
    response_model=DocumentBalanceDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Invoice not found",
            "content": _error_example("DOCUMENT_NOT_FOUND", "Invoice with ID ... not found"),
        }
    }
)
async def get_balance(
    document_id: str,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Get the settlement view of an invoice.

    **Returns:**
    - `paid_amount`: sum of recorded payments
    - `balance_due`: max(0, total - paid_amount)
    - `is_settled`: paid in full, or marked paid by the payment processor
    - `settlement_status`: unpaid, partially_paid or paid
    """
    use_case = GetDocumentBalance(
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(tenant_id, document_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value
