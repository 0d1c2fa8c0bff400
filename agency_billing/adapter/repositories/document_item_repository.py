"""SQLAlchemy Document Item Repository Implementation"""

from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.document_item_repository import DocumentItemRepository
from agency_billing.domain.document_item import DocumentItem


class SqlAlchemyDocumentItemRepository(DocumentItemRepository):
    """SQLAlchemy implementation of DocumentItemRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_document_id(self, document_id: str) -> List[DocumentItem]:
        """
        Retrieve all line items for a document in position order

        Args:
            document_id: Document ID

        Returns:
            List of DocumentItem
        """
        statement = (
            select(DocumentItem)
            .where(DocumentItem.document_id == document_id)
            .order_by(DocumentItem.position)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create_many(self, items: List[DocumentItem]) -> List[DocumentItem]:
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items

    async def replace_for_document(
        self, document_id: str, items: List[DocumentItem]
    ) -> List[DocumentItem]:
        await self.session.execute(
            delete(DocumentItem).where(DocumentItem.document_id == document_id)
        )
        return await self.create_many(items)
