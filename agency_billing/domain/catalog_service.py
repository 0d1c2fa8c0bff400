"""Catalog Service Domain Entity

An agency's price list: the services it sells, each with a default unit
price that seeds document line items.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, CheckConstraint, Numeric, String
from agency_billing.domain.base import BaseModel, generate_uuid


class UnitType(str, Enum):
    """How a service is billed"""
    HOURS = "hours"
    DAYS = "days"
    PROJECT = "project"
    ITEM = "item"


class CatalogService(BaseModel, table=True):
    """
    Catalog Service - Priced offering in a tenant's price list

    Domain Rules:
    - default_unit_price >= 0, stored with 4 decimal places like item prices
    - Inactive services stay listed for history but cannot seed new items
    - Changing a price never touches documents already created from it
    """

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("default_unit_price >= 0", name="ck_services_price_non_negative"),
        Index("ix_services_tenant_name", "tenant_id", "name"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique service identifier (uuid)"
    )

    tenant_id: str = Field(
        index=True,
        description="Owning tenant (agency) ID"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Service name (e.g., 'Logo design')"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional description copied to line items"
    )

    default_unit_price: Decimal = Field(
        sa_column=Column(Numeric(12, 4), nullable=False),
        description="Price per unit used when an item gives none"
    )

    unit_type: str = Field(
        default=UnitType.HOURS.value,
        sa_column=Column(String(20), nullable=False, default=UnitType.HOURS.value),
        description="hours, days, project or item"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False, default="USD"),
        description="Currency code (ISO 4217)"
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="Whether the service can be added to documents"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp (UTC)"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp (UTC)"
    )
