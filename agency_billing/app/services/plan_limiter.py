"""Plan Limiter

Enforces the subscription plan's monthly document quota.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.domain.billing_document import BILLABLE_STATUSES, DocumentKind
from agency_billing.domain.subscription_plan import SubscriptionPlan, get_plan

logger = logging.getLogger(__name__)

# Only invoices count against the plan quota
QUOTA_KINDS = frozenset({DocumentKind.INVOICE})


@dataclass(frozen=True)
class PlanUsage:
    """Documents used this month under a plan; unmetered kinds have no limit"""
    plan: SubscriptionPlan
    used: int
    metered: bool = True

    @property
    def plan_key(self) -> str:
        return self.plan.key

    @property
    def limit(self) -> Optional[int]:
        return self.plan.monthly_document_limit if self.metered else None

    @property
    def at_limit(self) -> bool:
        return self.metered and self.plan.is_limit_reached(self.used)


def start_of_month(now: datetime) -> datetime:
    """First instant of now's calendar month (UTC, naive)"""
    return datetime(now.year, now.month, 1)


class PlanLimiter:
    """
    Monthly quota check

    Business Rules:
    1. Plan key comes from the tenant; unset or unknown keys use the default plan
    2. Unlimited plans always allow
    3. Usage = documents of the kind in billable statuses created since the
       first day of the current UTC month
    4. Allowed while usage < limit

    The check is advisory: it is not serialized with the document insert.
    """

    def __init__(
        self,
        tenant_repo: TenantRepository,
        document_repo: BillingDocumentRepository,
    ):
        self.tenant_repo = tenant_repo
        self.document_repo = document_repo

    async def usage(
        self, tenant_id: str, kind: DocumentKind = DocumentKind.INVOICE, now: Optional[datetime] = None
    ) -> PlanUsage:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        plan = get_plan(tenant.subscription_plan if tenant else None)
        kind = DocumentKind(kind)

        if kind not in QUOTA_KINDS:
            return PlanUsage(plan=plan, used=0, metered=False)

        used = await self.document_repo.count_created_since(
            tenant_id=tenant_id,
            kind=kind,
            statuses=BILLABLE_STATUSES[kind],
            since=start_of_month(now or datetime.utcnow()),
        )
        return PlanUsage(plan=plan, used=used)

    async def check_and_reserve(
        self, tenant_id: str, kind: DocumentKind, now: Optional[datetime] = None
    ) -> Result[PlanUsage]:
        """
        Check whether the tenant may create another document of kind

        Args:
            tenant_id: Tenant identifier
            kind: Document kind to be created
            now: Clock override (selects the month)

        Returns:
            Result[PlanUsage]: usage on success, LIMIT_REACHED with the limit otherwise
        """
        usage = await self.usage(tenant_id, kind, now)

        if usage.at_limit:
            logger.warning(
                f"Plan limit reached for tenant {tenant_id}: "
                f"{usage.used}/{usage.limit} ({usage.plan_key})"
            )
            return Return.err(
                Error(
                    code=ErrorCode.LIMIT_REACHED,
                    message=f"Monthly {DocumentKind(kind).value} limit reached ({usage.limit})",
                    reason=f"plan={usage.plan_key}, used={usage.used}, limit={usage.limit}",
                    details={"limit": usage.limit},
                )
            )

        return Return.ok(usage)
