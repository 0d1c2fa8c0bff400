"""Catalog Use Cases

CreateService, ListServices and UpdateService manage a tenant's price
list. Line items are priced from it by ServiceCatalog.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.services.unit_of_work import UnitOfWork
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.app.repositories.catalog_service_repository import CatalogServiceRepository
from agency_billing.domain.catalog_service import CatalogService, UnitType
from agency_billing.domain.money import CurrencyError, INPUT_SCALE, has_scale, normalize_currency
from .dtos import (
    CreateServiceCommandDTO,
    UpdateServiceCommandDTO,
    ServiceDTO,
    ListServicesResponseDTO,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description", "default_unit_price", "unit_type", "currency", "is_active")


def to_service_dto(service: CatalogService) -> ServiceDTO:
    return ServiceDTO(
        service_id=service.id,
        name=service.name,
        description=service.description,
        default_unit_price=service.default_unit_price,
        unit_type=service.unit_type,
        currency=service.currency,
        is_active=service.is_active,
        created_at=service.created_at,
        updated_at=service.updated_at,
    )


def invalid(message: str) -> Result:
    return Return.err(Error(code=ErrorCode.VALIDATION_ERROR, message=message))


def price_error(price: Optional[Decimal]) -> Optional[str]:
    if price is None:
        return "default_unit_price is required"
    if price < 0:
        return "default_unit_price cannot be negative"
    if not has_scale(price):
        return f"default_unit_price supports at most {INPUT_SCALE} decimal places"
    return None


def unit_type_error(unit_type: Optional[str]) -> Optional[str]:
    if unit_type not in {u.value for u in UnitType}:
        return f"unit_type must be one of {', '.join(u.value for u in UnitType)}"
    return None


class CreateService:
    """
    Use Case: Add a service to the tenant's price list

    Business Rules:
    1. Name is required; the price must be >= 0 with at most 4 decimal places
    2. unit_type defaults to hours, currency to the tenant currency
    3. New services are active
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenant_repo: TenantRepository,
        service_repo: CatalogServiceRepository,
        default_currency: str = "USD",
    ):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.service_repo = service_repo
        self.default_currency = default_currency

    async def execute(self, command: CreateServiceCommandDTO) -> Result[ServiceDTO]:
        try:
            # Step 1: Validate input
            if not command.name or not command.name.strip():
                return invalid("Service name is required")

            message = price_error(command.default_unit_price)
            if message:
                return invalid(message)

            unit_type = command.unit_type or UnitType.HOURS.value
            message = unit_type_error(unit_type)
            if message:
                return invalid(message)

            tenant = await self.tenant_repo.get_by_id(command.tenant_id)
            if not tenant:
                return Return.err(
                    Error(
                        code=ErrorCode.TENANT_NOT_FOUND,
                        message=f"Tenant {command.tenant_id} not found",
                    )
                )

            try:
                currency = normalize_currency(command.currency or tenant.currency or self.default_currency)
            except CurrencyError as e:
                return invalid(str(e))

            # Step 2: Create and commit
            service = await self.service_repo.create(
                CatalogService(
                    tenant_id=command.tenant_id,
                    name=command.name.strip(),
                    description=command.description,
                    default_unit_price=command.default_unit_price,
                    unit_type=unit_type,
                    currency=currency,
                )
            )
            await self.uow.commit()

            logger.info(f"Created service {service.id} ({service.name}) for tenant {service.tenant_id}")

            return Return.ok(to_service_dto(service))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Service creation failed for tenant {command.tenant_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_SERVICE_FAILED",
                    message="Failed to create service",
                    reason=str(e),
                )
            )


class ListServices:
    """Use Case: List the tenant's services by name"""

    def __init__(self, service_repo: CatalogServiceRepository):
        self.service_repo = service_repo

    async def execute(self, tenant_id: str, active_only: bool = False) -> Result[ListServicesResponseDTO]:
        try:
            services = await self.service_repo.list_by_tenant(tenant_id, active_only=active_only)
            return Return.ok(
                ListServicesResponseDTO(services=[to_service_dto(s) for s in services])
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_SERVICES_FAILED",
                    message="Failed to list services",
                    reason=str(e),
                )
            )


class UpdateService:
    """
    Use Case: Edit a service

    Business Rules:
    1. The service must belong to the tenant
    2. At least one field must be given; given fields follow the creation rules
    3. Deactivating keeps the service listed but stops it pricing new items
    4. Documents already priced from the service are unchanged
    """

    def __init__(self, uow: UnitOfWork, service_repo: CatalogServiceRepository):
        self.uow = uow
        self.service_repo = service_repo

    async def execute(self, command: UpdateServiceCommandDTO) -> Result[ServiceDTO]:
        try:
            # Step 1: Load service
            service = await self.service_repo.get_by_id(command.tenant_id, command.service_id)
            if not service:
                return Return.err(
                    Error(
                        code=ErrorCode.SERVICE_NOT_FOUND,
                        message=f"Service with ID {command.service_id} not found",
                    )
                )

            # Step 2: Validate fields
            fields = [f for f in UPDATABLE_FIELDS if f in command.model_fields_set]
            if not fields:
                return invalid("No fields to update")

            if "name" in fields and (not command.name or not command.name.strip()):
                return invalid("Service name is required")

            if "default_unit_price" in fields:
                message = price_error(command.default_unit_price)
                if message:
                    return invalid(message)

            if "unit_type" in fields:
                message = unit_type_error(command.unit_type)
                if message:
                    return invalid(message)

            currency = service.currency
            if "currency" in fields:
                try:
                    currency = normalize_currency(command.currency)
                except CurrencyError as e:
                    return invalid(str(e))

            if "is_active" in fields and command.is_active is None:
                return invalid("is_active must be true or false")

            # Step 3: Apply and commit
            if "name" in fields:
                service.name = command.name.strip()
            if "description" in fields:
                service.description = command.description
            if "default_unit_price" in fields:
                service.default_unit_price = command.default_unit_price
            if "unit_type" in fields:
                service.unit_type = command.unit_type
            if "is_active" in fields:
                service.is_active = command.is_active
            service.currency = currency
            service.updated_at = datetime.utcnow()

            updated = await self.service_repo.update(service)
            await self.uow.commit()

            logger.info(f"Updated service {updated.id} ({', '.join(fields)})")

            return Return.ok(to_service_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_SERVICE_FAILED",
                    message="Failed to update service",
                    reason=str(e),
                )
            )
