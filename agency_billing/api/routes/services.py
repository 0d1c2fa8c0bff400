"""Service Catalog API Routes

The agency's price list. Services seed line item titles and prices.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from agency_billing.api.schemas.service_request import (
    CreateServiceRequestSchema,
    UpdateServiceRequestSchema,
)
from agency_billing.app.use_cases.billing.dtos import (
    CreateServiceCommandDTO,
    UpdateServiceCommandDTO,
    ServiceDTO,
    ListServicesResponseDTO,
)
from agency_billing.app.use_cases.billing.catalog import CreateService, ListServices, UpdateService
from agency_billing.adapter.repositories.catalog_service_repository import SqlAlchemyCatalogServiceRepository
from agency_billing.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from agency_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agency_billing.depends import get_session, get_tenant_id
from agency_billing.api.error import client_error

router = APIRouter(prefix="/services", tags=["Services"])


@router.get(
    "",
    response_model=ListServicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_services(
    active_only: bool = Query(False, description="Leave out inactive services"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """List the agency's services ordered by name."""
    use_case = ListServices(SqlAlchemyCatalogServiceRepository(session))
    result = await use_case.execute(tenant_id, active_only=active_only)

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.post(
    "",
    response_model=ServiceDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_service(
    request: CreateServiceRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Add a service to the price list.

    **Returns:**
    - 201: Service created
    - 400: Missing name, invalid price, unit type or currency
    - 404: Unknown tenant
    """
    use_case = CreateService(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyTenantRepository(session),
        SqlAlchemyCatalogServiceRepository(session),
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    result = await use_case.execute(
        CreateServiceCommandDTO(tenant_id=tenant_id, **request.model_dump())
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.patch(
    "/{service_id}",
    response_model=ServiceDTO,
    status_code=status.HTTP_200_OK,
)
async def update_service(
    service_id: str,
    request: UpdateServiceRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Edit or deactivate a service. Documents already created from it keep
    their prices.

    **Returns:**
    - 200: Updated service
    - 400: No fields given or an invalid value
    - 404: Unknown service
    """
    use_case = UpdateService(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCatalogServiceRepository(session),
    )
    result = await use_case.execute(
        UpdateServiceCommandDTO(
            tenant_id=tenant_id,
            service_id=service_id,
            **request.model_dump(exclude_unset=True),
        )
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value
