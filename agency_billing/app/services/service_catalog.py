"""Service Catalog

Seeds document line items from the tenant's price list.
"""

import logging
from typing import List

from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.repositories.catalog_service_repository import CatalogServiceRepository
from agency_billing.app.use_cases.billing.dtos import LineItemDTO

logger = logging.getLogger(__name__)


class ServiceCatalog:
    """
    Line item pricing from catalog services

    Business Rules:
    1. Items without service_id are returned unchanged
    2. The service must belong to the tenant and be active
    3. Title, description and unit price left blank on the item are taken
       from the service; values given on the item win
    """

    def __init__(self, service_repo: CatalogServiceRepository):
        self.service_repo = service_repo

    async def price_items(self, tenant_id: str, items: List[LineItemDTO]) -> Result[List[LineItemDTO]]:
        service_ids = [item.service_id for item in items if item.service_id]
        if not service_ids:
            return Return.ok(list(items))

        services = {
            service.id: service
            for service in await self.service_repo.get_many(tenant_id, service_ids)
        }

        priced = []
        for item in items:
            if not item.service_id:
                priced.append(item)
                continue

            service = services.get(item.service_id)
            if service is None or not service.is_active:
                logger.warning(
                    f"Line item references unavailable service {item.service_id} "
                    f"for tenant {tenant_id}"
                )
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message=f"Service {item.service_id} is not available",
                        reason="unknown" if service is None else "inactive",
                    )
                )

            priced.append(
                item.model_copy(
                    update={
                        "title": item.title if item.title and item.title.strip() else service.name,
                        "description": item.description if item.description is not None else service.description,
                        "unit_price": item.unit_price if item.unit_price is not None else service.default_unit_price,
                    }
                )
            )

        return Return.ok(priced)
