"""Payment API Routes

FastAPI routes for the invoice payment ledger.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agency_billing.api.schemas.payment_request import (
    RecordPaymentRequestSchema,
    UpdatePaymentRequestSchema,
    ProcessorPaymentRequestSchema,
)
from agency_billing.app.use_cases.billing.dtos import (
    RecordPaymentCommandDTO,
    UpdatePaymentCommandDTO,
    ProcessorPaymentCommandDTO,
    PaymentResponseDTO,
    ListPaymentsResponseDTO,
    DocumentBalanceDTO,
)
from agency_billing.app.use_cases.billing.record_payment import RecordPayment
from agency_billing.app.use_cases.billing.record_processor_payment import RecordProcessorPayment
from agency_billing.app.use_cases.billing.list_payments import ListPayments
from agency_billing.app.use_cases.billing.update_payment import UpdatePayment, DeletePayment
from agency_billing.adapter.repositories.billing_document_repository import SqlAlchemyBillingDocumentRepository
from agency_billing.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from agency_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agency_billing.depends import get_session, get_tenant_id
from agency_billing.api.error import client_error

router = APIRouter(tags=["Payments"])

PAYMENT_ERROR_RESPONSES = {
    400: {
        "description": "Payment rejected",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "EXCEEDS_BALANCE",
                        "message": "Payment exceeds balance due (70.00)",
                        "balance_due": "70.00"
                    }
                }
            }
        }
    },
    404: {
        "description": "Invoice not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "DOCUMENT_NOT_FOUND",
                        "message": "Invoice with ID ... not found"
                    }
                }
            }
        }
    }
}


@router.get(
    "/documents/{document_id}/payments",
    response_model=ListPaymentsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_payments(
    document_id: str,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """List an invoice's payments ordered by payment date (oldest first)."""
    use_case = ListPayments(
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(tenant_id, document_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/documents/{document_id}/payments",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=PAYMENT_ERROR_RESPONSES,
)
async def record_payment(
    document_id: str,
    request: RecordPaymentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Record a payment against an invoice.

    The sum of payments can never exceed the invoice total: a payment larger
    than the balance due is rejected, as is any payment on an invoice that is
    already fully paid. The invoice status is not changed; settlement is
    derived from the payments.

    **Request body:**
    - `amount` (required): Amount received (must be > 0)
    - `payment_date` (required): Date received
    - `method` (optional): cash, bank_transfer, card or other
    - `note` (optional): Free-form note

    **Returns:**
    - 201: Payment recorded, with the updated balance
    - 400: Invalid amount/date, already settled, or exceeds balance
    - 404: Unknown invoice
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = RecordPaymentCommandDTO(
        tenant_id=tenant_id,
        document_id=document_id,
        amount=request.amount,
        payment_date=request.payment_date,
        method=request.method,
        note=request.note,
    )

    use_case = RecordPayment(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.patch(
    "/payments/{payment_id}",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=PAYMENT_ERROR_RESPONSES,
)
async def update_payment(
    payment_id: str,
    request: UpdatePaymentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Edit a payment.

    Only the fields present in the body are changed. A new amount is checked
    against the balance computed without this payment.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdatePaymentCommandDTO(
        tenant_id=tenant_id,
        payment_id=payment_id,
        **request.model_dump(exclude_unset=True),
    )

    use_case = UpdatePayment(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.delete(
    "/payments/{payment_id}",
    response_model=DocumentBalanceDTO,
    status_code=status.HTTP_200_OK,
)
async def delete_payment(
    payment_id: str,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """Delete a payment and return the invoice's updated balance."""
    uow = SqlAlchemyUnitOfWork(session)

    use_case = DeletePayment(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(tenant_id, payment_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "/processor/payments",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=PAYMENT_ERROR_RESPONSES,
)
async def record_processor_payment(
    request: ProcessorPaymentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Record a payment confirmed by the payment processor.

    Called by the processor integration once a checkout completes (webhook
    signatures are verified upstream). Records a card payment and marks the
    invoice paid. Repeating a request with the same `external_reference`
    returns the original payment without recording it twice.

    **Request body:**
    - `document_id` (required): Invoice that was paid
    - `amount` (required): Captured amount
    - `external_reference` (required): Processor reference, idempotency key
    - `payment_date` (optional): Defaults to today
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = ProcessorPaymentCommandDTO(
        tenant_id=tenant_id,
        document_id=request.document_id,
        amount=request.amount,
        external_reference=request.external_reference,
        payment_date=request.payment_date,
    )

    use_case = RecordProcessorPayment(
        uow,
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value
