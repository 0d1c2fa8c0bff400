"""SQLAlchemy Sequence Counter Repository Implementation

Document numbers come from a single upsert statement:

    INSERT INTO sequence_counters (...) VALUES (..., 1)
    ON CONFLICT (tenant_id, name)
    DO UPDATE SET current_value = sequence_counters.current_value + 1
    RETURNING current_value

The row lock taken by the conflicting update serializes concurrent callers,
so two transactions never read the same value.
"""

import logging
from datetime import datetime
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession
from agency_billing.app.repositories.sequence_counter_repository import SequenceCounterRepository
from agency_billing.domain.base import generate_uuid
from agency_billing.domain.sequence_counter import SequenceCounter

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemySequenceCounterRepository(SequenceCounterRepository):
    """
    SQLAlchemy implementation of SequenceCounterRepository

    Supports PostgreSQL and SQLite (3.35+ for RETURNING).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self):
        dialect = self.session.bind.dialect.name
        if dialect not in UPSERT_DIALECTS:
            raise NotImplementedError(f"Sequence counters are not supported on {dialect}")
        return UPSERT_DIALECTS[dialect](SequenceCounter.__table__)

    async def next_value(self, tenant_id: str, name: str) -> int:
        """
        Atomically increment the (tenant_id, name) counter

        Args:
            tenant_id: Tenant identifier
            name: Sequence name

        Returns:
            New counter value (1 on first use)
        """
        table = SequenceCounter.__table__
        now = datetime.utcnow()

        stmt = self._insert().values(
            id=generate_uuid(),
            tenant_id=tenant_id,
            name=name,
            current_value=1,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.tenant_id, table.c.name],
            set_={
                "current_value": table.c.current_value + 1,
                "updated_at": now,
            },
        ).returning(table.c.current_value)

        result = await self.session.execute(stmt)
        value = result.scalar_one()
        logger.debug(f"Sequence {name} for tenant {tenant_id} advanced to {value}")
        return value
