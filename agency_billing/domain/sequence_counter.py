"""Sequence Counter Domain Entity

Per-tenant counters backing human-readable document numbers.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, String, UniqueConstraint
from agency_billing.domain.base import BaseModel, generate_uuid


class SequenceCounter(BaseModel, table=True):
    """
    Sequence Counter - Monotonic counter per tenant and sequence name

    Domain Rules:
    - One row per (tenant_id, name)
    - Mutated only by an atomic increment-and-return; never decreases
    - Gaps are acceptable (a number allocated by a failed request is lost)
    """

    __tablename__ = "sequence_counters"
    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_sequence_counters_tenant_name"),
        CheckConstraint("current_value >= 0", name="current_value_non_negative"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    tenant_id: str = Field(
        sa_column=Column(String(36), nullable=False),
        description="Tenant ID"
    )

    name: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Sequence name (e.g., invoice, proposal)"
    )

    current_value: int = Field(
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Last value handed out"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last increment timestamp"
    )
