from .base import BaseModel, generate_uuid
from .billing_document import (
    BillingDocument,
    DocumentKind,
    ProposalStatus,
    InvoiceStatus,
)
from .document_item import DocumentItem
from .catalog_service import CatalogService, UnitType
from .payment import Payment, PaymentMethod
from .tenant import Tenant
from .sequence_counter import SequenceCounter
from .subscription_plan import SubscriptionPlan, SUBSCRIPTION_PLANS, DEFAULT_PLAN_KEY
from .settlement import SettlementPolicy, SettlementStatus, PaymentRejection

__all__ = [
    "BaseModel",
    "generate_uuid",
    "BillingDocument",
    "DocumentKind",
    "ProposalStatus",
    "InvoiceStatus",
    "DocumentItem",
    "CatalogService",
    "UnitType",
    "Payment",
    "PaymentMethod",
    "Tenant",
    "SequenceCounter",
    "SubscriptionPlan",
    "SUBSCRIPTION_PLANS",
    "DEFAULT_PLAN_KEY",
    "SettlementPolicy",
    "SettlementStatus",
    "PaymentRejection",
]
