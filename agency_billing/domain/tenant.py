"""Tenant Domain Entity

Agency account settings: the unit of data isolation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric, String
from agency_billing.domain.base import BaseModel, generate_uuid


class Tenant(BaseModel, table=True):
    """
    Tenant - Agency settings

    Domain Rules:
    - subscription_plan may be unset (treated as the default plan)
    - default_tax_rate is copied onto new documents; changing it does not
      affect existing documents
    """

    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint(
            "default_tax_rate >= 0 AND default_tax_rate < 1",
            name="default_tax_rate_range",
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique tenant identifier"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Agency name"
    )

    subscription_plan: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Plan key (freelancer, starter, growth, scale)"
    )

    subscription_status: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Status reported by the payment processor (e.g., active)"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, default="USD"),
        description="Default currency for new documents"
    )

    default_tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 4), nullable=False, default=0),
        description="Default tax rate for new documents"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Tenant creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
