from .unit_of_work import UnitOfWork
from .plan_limiter import PlanLimiter, PlanUsage
from .sequence_allocator import SequenceAllocator, format_document_number
from .service_catalog import ServiceCatalog

__all__ = [
    "UnitOfWork",
    "PlanLimiter",
    "PlanUsage",
    "SequenceAllocator",
    "format_document_number",
    "ServiceCatalog",
]
