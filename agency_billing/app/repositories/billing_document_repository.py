"""Billing Document Repository Interface

Defines the contract for proposal/invoice persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional
from agency_billing.domain.billing_document import BillingDocument, DocumentKind


class BillingDocumentRepository(ABC):
    """
    Repository interface for BillingDocument persistence

    Every read is scoped to a tenant: a document owned by another tenant
    is reported as missing.
    """

    @abstractmethod
    async def create(self, document: BillingDocument) -> BillingDocument:
        """
        Create a new document

        Args:
            document: BillingDocument entity to persist

        Returns:
            Created BillingDocument
        """
        pass

    @abstractmethod
    async def get_by_id(
        self, tenant_id: str, document_id: str, for_update: bool = False
    ) -> Optional[BillingDocument]:
        """
        Retrieve a tenant's document by ID

        Args:
            tenant_id: Owning tenant
            document_id: Document ID
            for_update: If True, locks the row (SELECT FOR UPDATE)

        Returns:
            BillingDocument if found and owned by tenant, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: str,
        kind: Optional[DocumentKind] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[BillingDocument]:
        """
        List a tenant's documents, newest first

        Args:
            tenant_id: Tenant identifier
            kind: Optional filter by kind
            status: Optional filter by status
            limit: Maximum number of documents to return
            offset: Offset for pagination

        Returns:
            List of documents
        """
        pass

    @abstractmethod
    async def list_excluding_statuses(
        self, tenant_id: str, kind: DocumentKind, statuses: Iterable[str]
    ) -> List[BillingDocument]:
        """
        List all documents of a kind whose status is not in statuses

        Used by reports (e.g., invoices that are neither draft nor void).
        """
        pass

    @abstractmethod
    async def count_created_since(
        self,
        tenant_id: str,
        kind: DocumentKind,
        statuses: Iterable[str],
        since: datetime,
    ) -> int:
        """
        Count documents of a kind in the given statuses created at or after since

        Args:
            tenant_id: Tenant identifier
            kind: Document kind
            statuses: Statuses to count
            since: Inclusive lower bound on created_at (UTC)

        Returns:
            Number of matching documents
        """
        pass

    @abstractmethod
    async def update(self, document: BillingDocument) -> BillingDocument:
        """
        Update an existing document

        Args:
            document: BillingDocument with updated values

        Returns:
            Updated BillingDocument
        """
        pass
