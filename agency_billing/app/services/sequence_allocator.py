"""Sequence Allocator

Issues human-readable document numbers from per-tenant counters.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from agency_billing.app.repositories.sequence_counter_repository import SequenceCounterRepository
from agency_billing.domain.billing_document import DocumentKind

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = {
    DocumentKind.INVOICE: "INV",
    DocumentKind.PROPOSAL: "PRO",
}


def format_document_number(prefix: str, year: int, value: int) -> str:
    """e.g. INV-2024-0007"""
    return f"{prefix}-{year}-{value:04d}"


class SequenceAllocator:
    """
    Allocates document numbers

    Business Rules:
    1. One counter per tenant and document kind
    2. Increment-and-return is a single atomic statement in the store
    3. Numbers are never reused; gaps from failed creations are accepted

    Does not commit: the caller's unit of work owns the transaction.
    """

    def __init__(
        self,
        counter_repo: SequenceCounterRepository,
        prefixes: Optional[Dict[DocumentKind, str]] = None,
    ):
        self.counter_repo = counter_repo
        self.prefixes = prefixes or DEFAULT_PREFIXES

    async def next_value(self, tenant_id: str, kind: DocumentKind) -> int:
        return await self.counter_repo.next_value(tenant_id, DocumentKind(kind).value)

    async def next_number(
        self, tenant_id: str, kind: DocumentKind, now: Optional[datetime] = None
    ) -> str:
        """
        Allocate the next document number for a tenant

        Args:
            tenant_id: Tenant identifier
            kind: Document kind (selects counter and prefix)
            now: Clock override (the year comes from it)

        Returns:
            Formatted document number
        """
        kind = DocumentKind(kind)
        value = await self.next_value(tenant_id, kind)
        year = (now or datetime.utcnow()).year
        number = format_document_number(self.prefixes[kind], year, value)
        logger.info(f"Allocated document number {number} for tenant {tenant_id}")
        return number
