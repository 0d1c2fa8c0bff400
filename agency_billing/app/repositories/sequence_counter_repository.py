"""Sequence Counter Repository Interface"""

from abc import ABC, abstractmethod


class SequenceCounterRepository(ABC):
    """Repository interface for per-tenant counters"""

    @abstractmethod
    async def next_value(self, tenant_id: str, name: str) -> int:
        """
        Atomically increment the counter and return the new value

        Creates the counter at 1 on first use. Concurrent callers for the
        same (tenant_id, name) never receive the same value.

        Args:
            tenant_id: Tenant identifier
            name: Sequence name (e.g., invoice)

        Returns:
            New counter value
        """
        pass
