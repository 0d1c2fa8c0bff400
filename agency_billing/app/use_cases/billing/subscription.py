"""GetPlanUsage and SyncSubscriptionPlan Use Cases"""

import logging
from datetime import datetime
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.domain.billing_document import DocumentKind
from agency_billing.domain.subscription_plan import SUBSCRIPTION_PLANS
from .dtos import PlanUsageResponseDTO, SyncSubscriptionPlanCommandDTO, TenantPlanResponseDTO

logger = logging.getLogger(__name__)


class GetPlanUsage:
    """Use Case: Current month's invoice usage against the tenant's plan"""

    def __init__(self, plan_limiter: PlanLimiter):
        self.plan_limiter = plan_limiter

    async def execute(self, tenant_id: str) -> Result[PlanUsageResponseDTO]:
        try:
            usage = await self.plan_limiter.usage(tenant_id, DocumentKind.INVOICE)
            return Return.ok(
                PlanUsageResponseDTO(
                    plan_key=usage.plan_key,
                    used=usage.used,
                    limit=usage.limit,
                    at_limit=usage.at_limit,
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_PLAN_USAGE_FAILED",
                    message="Failed to compute plan usage",
                    reason=str(e),
                )
            )


class SyncSubscriptionPlan:
    """
    Use Case: Apply a plan change reported by the payment processor

    Business Rules:
    1. Tenant must exist
    2. Only known plan keys are accepted
    3. subscription_status is stored as reported when given
    """

    def __init__(self, uow: UnitOfWork, tenant_repo: TenantRepository):
        self.uow = uow
        self.tenant_repo = tenant_repo

    async def execute(self, command: SyncSubscriptionPlanCommandDTO) -> Result[TenantPlanResponseDTO]:
        try:
            plan = SUBSCRIPTION_PLANS.get(command.plan_key)
            if plan is None:
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message=f"Unknown plan: {command.plan_key}",
                        details={"allowed": sorted(SUBSCRIPTION_PLANS)},
                    )
                )

            tenant = await self.tenant_repo.get_by_id(command.tenant_id, for_update=True)
            if not tenant:
                return Return.err(
                    Error(
                        code=ErrorCode.TENANT_NOT_FOUND,
                        message=f"Tenant {command.tenant_id} not found",
                    )
                )

            previous = tenant.subscription_plan
            tenant.subscription_plan = plan.key
            if command.subscription_status is not None:
                tenant.subscription_status = command.subscription_status
            tenant.updated_at = datetime.utcnow()

            tenant = await self.tenant_repo.update(tenant)
            await self.uow.commit()

            logger.info(f"Tenant {tenant.id} plan changed: {previous} -> {plan.key}")

            return Return.ok(
                TenantPlanResponseDTO(
                    tenant_id=tenant.id,
                    plan_key=plan.key,
                    subscription_status=tenant.subscription_status,
                    monthly_document_limit=plan.monthly_document_limit,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SYNC_SUBSCRIPTION_FAILED",
                    message="Failed to update subscription plan",
                    reason=str(e),
                )
            )
