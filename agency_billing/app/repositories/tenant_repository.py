"""Tenant Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from agency_billing.domain.tenant import Tenant


class TenantRepository(ABC):
    """Repository interface for Tenant persistence"""

    @abstractmethod
    async def get_by_id(self, tenant_id: str, for_update: bool = False) -> Optional[Tenant]:
        """
        Retrieve tenant by ID

        Args:
            tenant_id: Tenant identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Tenant if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        pass
