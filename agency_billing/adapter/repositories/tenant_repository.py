"""SQLAlchemy Tenant Repository Implementation"""

from typing import Optional
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.domain.tenant import Tenant


class SqlAlchemyTenantRepository(TenantRepository):
    """SQLAlchemy implementation of TenantRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: str, for_update: bool = False) -> Optional[Tenant]:
        """
        Retrieve tenant by ID with optional row-level locking

        Args:
            tenant_id: Tenant identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Tenant if found, None otherwise
        """
        stmt = select(Tenant).where(Tenant.id == tenant_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, tenant: Tenant) -> Tenant:
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def update(self, tenant: Tenant) -> Tenant:
        tenant.updated_at = datetime.utcnow()
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant
