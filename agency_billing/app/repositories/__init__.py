from .billing_document_repository import BillingDocumentRepository
from .document_item_repository import DocumentItemRepository
from .payment_repository import PaymentRepository
from .tenant_repository import TenantRepository
from .sequence_counter_repository import SequenceCounterRepository
from .catalog_service_repository import CatalogServiceRepository

__all__ = [
    "BillingDocumentRepository",
    "DocumentItemRepository",
    "PaymentRepository",
    "TenantRepository",
    "SequenceCounterRepository",
    "CatalogServiceRepository",
]
