"""Unit tests for PlanLimiter"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from agency_billing.app.services.plan_limiter import PlanLimiter, PlanUsage, start_of_month
from agency_billing.domain.billing_document import DocumentKind
from agency_billing.domain.subscription_plan import SubscriptionPlan


@pytest.fixture
def mock_tenant_repo(sample_tenant):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_tenant)
    return repo


@pytest.fixture
def mock_document_repo():
    return MagicMock()


@pytest.fixture
def limiter(mock_tenant_repo, mock_document_repo):
    return PlanLimiter(mock_tenant_repo, mock_document_repo)


@pytest.fixture
def plan_with_limit_5(monkeypatch):
    plan = SubscriptionPlan(key="starter", name="Starter", monthly_document_limit=5)
    monkeypatch.setattr("agency_billing.app.services.plan_limiter.get_plan", lambda key: plan)
    return plan


def test_start_of_month():
    assert start_of_month(datetime(2024, 2, 29, 23, 59, 59)) == datetime(2024, 2, 1)


@pytest.mark.asyncio
class TestCheckAndReserve:

    async def test_limit_reached(self, limiter, mock_document_repo, plan_with_limit_5):
        """
        Given: Plan limit 5 and 5 billable invoices this month
        When: check_and_reserve is called for an invoice
        Then: LIMIT_REACHED with limit 5
        """
        mock_document_repo.count_created_since = AsyncMock(return_value=5)

        result = await limiter.check_and_reserve("tenant_123", DocumentKind.INVOICE)

        assert result.is_err()
        assert result.error.code == "LIMIT_REACHED"
        assert result.error.details == {"limit": 5}

    async def test_below_limit_allowed(self, limiter, mock_document_repo, plan_with_limit_5):
        """
        Given: Plan limit 5 and 4 billable invoices this month
        When: check_and_reserve is called
        Then: Allowed with usage 4/5
        """
        mock_document_repo.count_created_since = AsyncMock(return_value=4)

        result = await limiter.check_and_reserve("tenant_123", DocumentKind.INVOICE)

        assert result.is_ok()
        assert result.value.used == 4
        assert result.value.limit == 5
        assert not result.value.at_limit

    async def test_counts_billable_invoices_since_month_start(self, limiter, mock_document_repo):
        mock_document_repo.count_created_since = AsyncMock(return_value=0)

        await limiter.check_and_reserve(
            "tenant_123", DocumentKind.INVOICE, now=datetime(2024, 3, 17, 12, 0, 0)
        )

        kwargs = mock_document_repo.count_created_since.call_args.kwargs
        assert kwargs["tenant_id"] == "tenant_123"
        assert kwargs["kind"] == DocumentKind.INVOICE
        assert set(kwargs["statuses"]) == {"sent", "paid", "overdue"}
        assert kwargs["since"] == datetime(2024, 3, 1)

    async def test_unlimited_plan_always_allows(self, limiter, mock_document_repo, sample_tenant):
        sample_tenant.subscription_plan = "scale"
        mock_document_repo.count_created_since = AsyncMock(return_value=100_000)

        result = await limiter.check_and_reserve("tenant_123", DocumentKind.INVOICE)

        assert result.is_ok()
        assert result.value.limit is None

    async def test_missing_tenant_uses_default_plan(self, limiter, mock_tenant_repo, mock_document_repo):
        mock_tenant_repo.get_by_id = AsyncMock(return_value=None)
        mock_document_repo.count_created_since = AsyncMock(return_value=10)

        result = await limiter.check_and_reserve("tenant_unknown", DocumentKind.INVOICE)

        assert result.is_err()
        assert result.error.details == {"limit": 10}

    async def test_proposals_are_not_limited(self, limiter, mock_document_repo):
        mock_document_repo.count_created_since = AsyncMock(return_value=1000)

        result = await limiter.check_and_reserve("tenant_123", DocumentKind.PROPOSAL)

        assert result.is_ok()
        assert result.value.limit is None
        assert not result.value.at_limit
        mock_document_repo.count_created_since.assert_not_called()


class TestPlanUsage:

    def test_at_limit_follows_the_plan_rule(self):
        plan = SubscriptionPlan(key="starter", name="Starter", monthly_document_limit=5)

        assert not PlanUsage(plan=plan, used=4).at_limit
        assert PlanUsage(plan=plan, used=5).at_limit
        assert PlanUsage(plan=plan, used=5).limit == 5

    def test_unlimited_plan_is_never_at_limit(self):
        plan = SubscriptionPlan(key="scale", name="Scale", monthly_document_limit=None)

        assert not PlanUsage(plan=plan, used=100_000).at_limit

    def test_unmetered_kind_has_no_limit(self):
        plan = SubscriptionPlan(key="starter", name="Starter", monthly_document_limit=5)
        usage = PlanUsage(plan=plan, used=0, metered=False)

        assert usage.limit is None
        assert not usage.at_limit
        assert usage.plan_key == "starter"
