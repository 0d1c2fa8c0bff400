"""SQLAlchemy Catalog Service Repository Implementation"""

from datetime import datetime
from typing import Iterable, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.catalog_service_repository import CatalogServiceRepository
from agency_billing.domain.catalog_service import CatalogService


class SqlAlchemyCatalogServiceRepository(CatalogServiceRepository):
    """SQLAlchemy implementation of CatalogServiceRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, service: CatalogService) -> CatalogService:
        self.session.add(service)
        await self.session.flush()
        await self.session.refresh(service)
        return service

    async def get_by_id(self, tenant_id: str, service_id: str) -> Optional[CatalogService]:
        stmt = select(CatalogService).where(
            CatalogService.id == service_id,
            CatalogService.tenant_id == tenant_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, tenant_id: str, service_ids: Iterable[str]) -> List[CatalogService]:
        service_ids = list(set(service_ids))
        if not service_ids:
            return []

        stmt = select(CatalogService).where(
            CatalogService.tenant_id == tenant_id,
            CatalogService.id.in_(service_ids),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_tenant(self, tenant_id: str, active_only: bool = False) -> List[CatalogService]:
        stmt = select(CatalogService).where(CatalogService.tenant_id == tenant_id)

        if active_only:
            stmt = stmt.where(CatalogService.is_active.is_(True))

        stmt = stmt.order_by(CatalogService.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, service: CatalogService) -> CatalogService:
        service.updated_at = datetime.utcnow()
        self.session.add(service)
        await self.session.flush()
        await self.session.refresh(service)
        return service
