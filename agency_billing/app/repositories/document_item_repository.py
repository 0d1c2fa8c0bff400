"""Document Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from agency_billing.domain.document_item import DocumentItem


class DocumentItemRepository(ABC):
    """Repository interface for DocumentItem persistence"""

    @abstractmethod
    async def get_by_document_id(self, document_id: str) -> List[DocumentItem]:
        """
        Retrieve a document's items in position order

        Args:
            document_id: Document ID

        Returns:
            List of items
        """
        pass

    @abstractmethod
    async def create_many(self, items: List[DocumentItem]) -> List[DocumentItem]:
        """
        Persist new items

        Args:
            items: Items to insert

        Returns:
            Created items
        """
        pass

    @abstractmethod
    async def replace_for_document(
        self, document_id: str, items: List[DocumentItem]
    ) -> List[DocumentItem]:
        """
        Delete all items of a document and insert the given ones

        Must run inside the caller's transaction so a failure leaves the
        previous item set untouched.

        Args:
            document_id: Document ID
            items: New item set

        Returns:
            Created items
        """
        pass
