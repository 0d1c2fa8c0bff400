"""SQLAlchemy Billing Document Repository Implementation

Implements proposal/invoice persistence using SQLAlchemy async session.
"""

from typing import Iterable, List, Optional
from datetime import datetime
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.domain.billing_document import BillingDocument, DocumentKind


class SqlAlchemyBillingDocumentRepository(BillingDocumentRepository):
    """
    SQLAlchemy implementation of BillingDocumentRepository

    Features:
    - Every query is filtered by tenant_id
    - Pessimistic locking via SELECT FOR UPDATE for payment checks and edits
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: BillingDocument) -> BillingDocument:
        """
        Create a new document

        Args:
            document: BillingDocument entity to persist

        Returns:
            Created BillingDocument
        """
        self.session.add(document)
        await self.session.flush()
        await self.session.refresh(document)
        return document

    async def get_by_id(
        self, tenant_id: str, document_id: str, for_update: bool = False
    ) -> Optional[BillingDocument]:
        """
        Retrieve a tenant's document by ID with optional row-level locking

        Args:
            tenant_id: Owning tenant
            document_id: Document ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            BillingDocument if found, None otherwise
        """
        stmt = (
            select(BillingDocument)
            .where(BillingDocument.id == document_id)
            .where(BillingDocument.tenant_id == tenant_id)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_tenant(
        self,
        tenant_id: str,
        kind: Optional[DocumentKind] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[BillingDocument]:
        statement = select(BillingDocument).where(BillingDocument.tenant_id == tenant_id)

        if kind:
            statement = statement.where(BillingDocument.kind == DocumentKind(kind))

        if status:
            statement = statement.where(BillingDocument.status == status)

        statement = statement.order_by(BillingDocument.created_at.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_excluding_statuses(
        self, tenant_id: str, kind: DocumentKind, statuses: Iterable[str]
    ) -> List[BillingDocument]:
        statement = (
            select(BillingDocument)
            .where(BillingDocument.tenant_id == tenant_id)
            .where(BillingDocument.kind == DocumentKind(kind))
            .where(BillingDocument.status.notin_(list(statuses)))
            .order_by(BillingDocument.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_created_since(
        self,
        tenant_id: str,
        kind: DocumentKind,
        statuses: Iterable[str],
        since: datetime,
    ) -> int:
        statement = (
            select(func.count())
            .select_from(BillingDocument)
            .where(BillingDocument.tenant_id == tenant_id)
            .where(BillingDocument.kind == DocumentKind(kind))
            .where(BillingDocument.status.in_(list(statuses)))
            .where(BillingDocument.created_at >= since)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def update(self, document: BillingDocument) -> BillingDocument:
        """
        Update an existing document

        Args:
            document: BillingDocument entity with updated values

        Returns:
            Updated BillingDocument
        """
        document.updated_at = datetime.utcnow()
        self.session.add(document)
        await self.session.flush()
        await self.session.refresh(document)
        return document
