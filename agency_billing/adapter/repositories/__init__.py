from .billing_document_repository import SqlAlchemyBillingDocumentRepository
from .document_item_repository import SqlAlchemyDocumentItemRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .tenant_repository import SqlAlchemyTenantRepository
from .sequence_counter_repository import SqlAlchemySequenceCounterRepository
from .catalog_service_repository import SqlAlchemyCatalogServiceRepository

__all__ = [
    "SqlAlchemyBillingDocumentRepository",
    "SqlAlchemyDocumentItemRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyTenantRepository",
    "SqlAlchemySequenceCounterRepository",
    "SqlAlchemyCatalogServiceRepository",
]
