"""Unit tests for CreateService, ListServices and UpdateService"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from agency_billing.app.use_cases.billing.catalog import CreateService, ListServices, UpdateService
from agency_billing.app.use_cases.billing.dtos import CreateServiceCommandDTO, UpdateServiceCommandDTO
from agency_billing.domain.catalog_service import CatalogService


@pytest.fixture
def sample_service():
    return CatalogService(
        id="svc_1",
        tenant_id="tenant_123",
        name="Consulting",
        default_unit_price=Decimal("80.0000"),
        unit_type="hours",
        currency="EUR",
        is_active=True,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def mock_tenant_repo(sample_tenant):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_tenant)
    return repo


@pytest.fixture
def mock_service_repo(sample_service):
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda service: service)
    repo.get_by_id = AsyncMock(return_value=sample_service)
    repo.list_by_tenant = AsyncMock(return_value=[sample_service])
    repo.update = AsyncMock(side_effect=lambda service: service)
    return repo


def create_command(**overrides):
    data = dict(tenant_id="tenant_123", name="Logo design", default_unit_price=Decimal("450.00"))
    data.update(overrides)
    return CreateServiceCommandDTO(**data)


@pytest.mark.asyncio
class TestCreateService:

    async def test_defaults(self, mock_uow, mock_tenant_repo, mock_service_repo):
        """
        Given: Name and price only
        When: CreateService is executed
        Then: Active service billed in hours, in the tenant currency (EUR)
        """
        result = await CreateService(mock_uow, mock_tenant_repo, mock_service_repo).execute(create_command())

        assert result.is_ok()
        assert result.value.unit_type == "hours"
        assert result.value.currency == "EUR"
        assert result.value.is_active
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "  "},
            {"default_unit_price": None},
            {"default_unit_price": Decimal("-1")},
            {"default_unit_price": Decimal("1.23456")},
            {"unit_type": "weeks"},
            {"currency": "EURO"},
        ],
    )
    async def test_invalid_fields(self, mock_uow, mock_tenant_repo, mock_service_repo, overrides):
        result = await CreateService(mock_uow, mock_tenant_repo, mock_service_repo).execute(
            create_command(**overrides)
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        mock_service_repo.create.assert_not_called()

    async def test_repository_failure_rolls_back(self, mock_uow, mock_tenant_repo, mock_service_repo):
        mock_service_repo.create = AsyncMock(side_effect=Exception("Database error"))

        result = await CreateService(mock_uow, mock_tenant_repo, mock_service_repo).execute(create_command())

        assert result.error.code == "CREATE_SERVICE_FAILED"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
async def test_list_services_passes_filter(mock_service_repo):
    result = await ListServices(mock_service_repo).execute("tenant_123", active_only=True)

    assert [s.service_id for s in result.value.services] == ["svc_1"]
    mock_service_repo.list_by_tenant.assert_called_once_with("tenant_123", active_only=True)


@pytest.mark.asyncio
class TestUpdateService:

    async def test_only_given_fields_change(self, mock_uow, mock_service_repo, sample_service):
        result = await UpdateService(mock_uow, mock_service_repo).execute(
            UpdateServiceCommandDTO(
                tenant_id="tenant_123", service_id="svc_1", default_unit_price=Decimal("95"), is_active=False
            )
        )

        assert result.is_ok()
        assert result.value.default_unit_price == Decimal("95")
        assert not result.value.is_active
        assert result.value.name == "Consulting"
        assert result.value.currency == "EUR"

    async def test_no_fields(self, mock_uow, mock_service_repo):
        result = await UpdateService(mock_uow, mock_service_repo).execute(
            UpdateServiceCommandDTO(tenant_id="tenant_123", service_id="svc_1")
        )

        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "No fields to update"

    async def test_invalid_value_is_rejected_not_ignored(self, mock_uow, mock_service_repo):
        result = await UpdateService(mock_uow, mock_service_repo).execute(
            UpdateServiceCommandDTO(tenant_id="tenant_123", service_id="svc_1", unit_type="weeks")
        )

        assert result.error.code == "VALIDATION_ERROR"
        mock_service_repo.update.assert_not_called()

    async def test_other_tenant(self, mock_uow, mock_service_repo):
        mock_service_repo.get_by_id = AsyncMock(return_value=None)

        result = await UpdateService(mock_uow, mock_service_repo).execute(
            UpdateServiceCommandDTO(tenant_id="tenant_other", service_id="svc_1", name="X")
        )

        assert result.error.code == "SERVICE_NOT_FOUND"
