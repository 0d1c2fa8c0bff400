"""Subscription plans

Immutable plan configuration, looked up by the tenant's plan key.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class SubscriptionPlan:
    key: str
    name: str
    # None = unlimited
    monthly_document_limit: Optional[int]

    def is_limit_reached(self, used_this_month: int) -> bool:
        if self.monthly_document_limit is None:
            return False
        return used_this_month >= self.monthly_document_limit


SUBSCRIPTION_PLANS: Dict[str, SubscriptionPlan] = {
    "freelancer": SubscriptionPlan(key="freelancer", name="Freelancer", monthly_document_limit=10),
    "starter": SubscriptionPlan(key="starter", name="Starter", monthly_document_limit=25),
    "growth": SubscriptionPlan(key="growth", name="Growth", monthly_document_limit=150),
    "scale": SubscriptionPlan(key="scale", name="Scale", monthly_document_limit=None),
}

DEFAULT_PLAN_KEY = "freelancer"


def normalize_plan_key(value: Optional[str]) -> str:
    """Known plan key, or the default plan for unset/unknown values"""
    if value and value in SUBSCRIPTION_PLANS:
        return value
    return DEFAULT_PLAN_KEY


def get_plan(value: Optional[str]) -> SubscriptionPlan:
    return SUBSCRIPTION_PLANS[normalize_plan_key(value)]
