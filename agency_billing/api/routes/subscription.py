"""Subscription API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agency_billing.api.schemas.payment_request import SyncPlanRequestSchema
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.use_cases.billing.dtos import (
    PlanUsageResponseDTO,
    SyncSubscriptionPlanCommandDTO,
    TenantPlanResponseDTO,
)
from agency_billing.app.use_cases.billing.subscription import GetPlanUsage, SyncSubscriptionPlan
from agency_billing.adapter.repositories.billing_document_repository import SqlAlchemyBillingDocumentRepository
from agency_billing.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from agency_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agency_billing.depends import get_session, get_tenant_id
from agency_billing.api.error import client_error

router = APIRouter(prefix="/subscription", tags=["Subscription"])


@router.get(
    "/usage",
    response_model=PlanUsageResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_usage(
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Invoices counted against the plan this month.

    Counts invoices in sent, paid or overdue status created since the first
    day of the current month (UTC). `limit` is null on unlimited plans.
    """
    plan_limiter = PlanLimiter(
        SqlAlchemyTenantRepository(session),
        SqlAlchemyBillingDocumentRepository(session),
    )
    result = await GetPlanUsage(plan_limiter).execute(tenant_id)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.put(
    "/plan",
    response_model=TenantPlanResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Unknown plan",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Unknown plan: enterprise",
                            "allowed": ["freelancer", "growth", "scale", "starter"]
                        }
                    }
                }
            }
        }
    }
)
async def sync_plan(
    request: SyncPlanRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Apply a plan change reported by the payment processor's subscription events.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = SyncSubscriptionPlanCommandDTO(
        tenant_id=tenant_id,
        plan_key=request.plan_key,
        subscription_status=request.subscription_status,
    )

    use_case = SyncSubscriptionPlan(uow, SqlAlchemyTenantRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise client_error(result.error)

    return result.value
