"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional
from agency_billing.domain.payment import Payment


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Balance checks that use sum_for_document must run while the parent
    document row is locked.
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment
        """
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        """
        Retrieve payment by ID

        Args:
            payment_id: Payment ID

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_external_reference(self, reference: str) -> Optional[Payment]:
        """
        Retrieve payment by processor reference (idempotency lookup)

        Args:
            reference: Processor reference

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_document(self, document_id: str) -> List[Payment]:
        """
        List payments of a document ordered by payment_date ascending

        Args:
            document_id: Document ID

        Returns:
            List of payments
        """
        pass

    @abstractmethod
    async def sum_for_document(
        self, document_id: str, exclude_payment_id: Optional[str] = None
    ) -> Decimal:
        """
        Sum of payment amounts for a document

        Args:
            document_id: Document ID
            exclude_payment_id: Payment to leave out (used when updating it)

        Returns:
            Sum of amounts (0 when there are no payments)
        """
        pass

    @abstractmethod
    async def list_by_documents(
        self,
        document_ids: List[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Payment]:
        """
        List payments of several documents, optionally within a payment_date range

        Args:
            document_ids: Document IDs
            start_date: Inclusive lower bound on payment_date
            end_date: Inclusive upper bound on payment_date

        Returns:
            List of payments
        """
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        """
        Update an existing payment

        Args:
            payment: Payment with updated values

        Returns:
            Updated Payment
        """
        pass

    @abstractmethod
    async def delete(self, payment: Payment) -> None:
        """
        Delete a payment

        Args:
            payment: Payment to delete
        """
        pass
