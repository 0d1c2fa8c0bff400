"""Request schemas for the service catalog API"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CreateServiceRequestSchema(BaseModel):
    """
    Request schema for adding a service

    Used for POST /services endpoint.
    """

    name: str = Field(
        default="",
        max_length=255,
        description="Service name (required, non-blank)"
    )

    description: Optional[str] = Field(
        default=None,
        description="Copied to line items priced from the service"
    )

    default_unit_price: Optional[Decimal] = Field(
        default=None,
        description="Price per unit (>= 0, at most 4 decimal places)"
    )

    unit_type: Optional[str] = Field(
        default=None,
        description="hours, days, project or item; defaults to hours"
    )

    currency: Optional[str] = Field(
        default=None,
        description="ISO 4217 code; defaults to the agency currency"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Logo design",
                "description": "Three concepts, two revision rounds",
                "default_unit_price": "450.00",
                "unit_type": "project"
            }
        }


class UpdateServiceRequestSchema(BaseModel):
    """
    Request schema for PATCH /services/{service_id}

    Only the fields present in the body are changed.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    unit_type: Optional[str] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None
