"""Catalog Service Repository Interface"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from agency_billing.domain.catalog_service import CatalogService


class CatalogServiceRepository(ABC):
    """Repository interface for a tenant's price list"""

    @abstractmethod
    async def create(self, service: CatalogService) -> CatalogService:
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: str, service_id: str) -> Optional[CatalogService]:
        """
        Retrieve a tenant's service by ID

        Args:
            tenant_id: Owning tenant
            service_id: Service ID

        Returns:
            CatalogService if found and owned by tenant, None otherwise
        """
        pass

    @abstractmethod
    async def get_many(self, tenant_id: str, service_ids: Iterable[str]) -> List[CatalogService]:
        """
        Retrieve several of a tenant's services; unknown IDs are skipped

        Args:
            tenant_id: Owning tenant
            service_ids: Service IDs

        Returns:
            Matching services in no particular order
        """
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: str, active_only: bool = False) -> List[CatalogService]:
        """
        List a tenant's services ordered by name

        Args:
            tenant_id: Tenant identifier
            active_only: If True, inactive services are left out

        Returns:
            List of services
        """
        pass

    @abstractmethod
    async def update(self, service: CatalogService) -> CatalogService:
        pass
