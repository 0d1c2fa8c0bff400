"""Unit tests for subscription plan lookup"""

import pytest

from agency_billing.domain.subscription_plan import (
    DEFAULT_PLAN_KEY,
    get_plan,
    normalize_plan_key,
)


class TestPlans:

    @pytest.mark.parametrize("key,limit", [
        ("freelancer", 10),
        ("starter", 25),
        ("growth", 150),
        ("scale", None),
    ])
    def test_plan_limits(self, key, limit):
        assert get_plan(key).monthly_document_limit == limit

    @pytest.mark.parametrize("value", [None, "", "enterprise", "Growth"])
    def test_unknown_keys_use_default_plan(self, value):
        assert normalize_plan_key(value) == DEFAULT_PLAN_KEY
        assert get_plan(value).key == "freelancer"

    def test_limit_reached(self):
        plan = get_plan("freelancer")

        assert not plan.is_limit_reached(9)
        assert plan.is_limit_reached(10)
        assert not get_plan("scale").is_limit_reached(10_000)
