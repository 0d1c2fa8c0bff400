"""SQLAlchemy Payment Repository Implementation"""

from typing import List, Optional
from datetime import date
from decimal import Decimal
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.payment_repository import PaymentRepository
from agency_billing.domain.money import ZERO
from agency_billing.domain.payment import Payment


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Sums are computed in the database so a balance check sees every
    payment flushed in the current transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment
        """
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        statement = select(Payment).where(Payment.id == payment_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_external_reference(self, reference: str) -> Optional[Payment]:
        statement = select(Payment).where(Payment.external_reference == reference)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_document(self, document_id: str) -> List[Payment]:
        """
        Retrieve payments of a document, oldest payment_date first

        Ties on payment_date keep insertion order.
        """
        statement = (
            select(Payment)
            .where(Payment.document_id == document_id)
            .order_by(Payment.payment_date, Payment.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def sum_for_document(
        self, document_id: str, exclude_payment_id: Optional[str] = None
    ) -> Decimal:
        statement = select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.document_id == document_id
        )

        if exclude_payment_id:
            statement = statement.where(Payment.id != exclude_payment_id)

        result = await self.session.execute(statement)
        total = result.scalar_one()
        return Decimal(str(total)) if total else ZERO

    async def list_by_documents(
        self,
        document_ids: List[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Payment]:
        if not document_ids:
            return []

        statement = select(Payment).where(Payment.document_id.in_(document_ids))

        if start_date:
            statement = statement.where(Payment.payment_date >= start_date)

        if end_date:
            statement = statement.where(Payment.payment_date <= end_date)

        statement = statement.order_by(Payment.payment_date, Payment.created_at)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def delete(self, payment: Payment) -> None:
        await self.session.delete(payment)
        await self.session.flush()
