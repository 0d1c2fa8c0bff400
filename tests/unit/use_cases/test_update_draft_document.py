"""Unit tests for UpdateDraftDocument use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from agency_billing.app.use_cases.billing.update_draft_document import UpdateDraftDocument
from agency_billing.app.use_cases.billing.dtos import UpdateDocumentCommandDTO, LineItemDTO
from agency_billing.libs.result import Return


@pytest.fixture
def mock_document_repo(sample_invoice):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_invoice)
    repo.update = AsyncMock(side_effect=lambda document: document)
    return repo


@pytest.fixture
def mock_item_repo():
    repo = MagicMock()
    repo.replace_for_document = AsyncMock(side_effect=lambda document_id, items: items)
    return repo


@pytest.fixture
def update_use_case(mock_uow, mock_document_repo, mock_item_repo):
    return UpdateDraftDocument(mock_uow, mock_document_repo, mock_item_repo)


def make_command(**overrides):
    data = dict(
        tenant_id="tenant_123",
        document_id="doc_inv_1",
        title="Website redesign v2",
        items=[LineItemDTO(title="Design", quantity=Decimal("3"), unit_price=Decimal("40.00"))],
    )
    data.update(overrides)
    return UpdateDocumentCommandDTO(**data)


@pytest.mark.asyncio
class TestUpdateDraftDocument:

    async def test_replaces_items_and_recomputes_totals(
        self, update_use_case, sample_invoice, mock_item_repo, mock_uow
    ):
        """
        Given: Draft invoice with tax rate 0.10
        When: Items are replaced with 3 x 40.00
        Then: subtotal 120.00, tax 12.00, total 132.00; items replaced in one transaction
        """
        sample_invoice.status = "draft"
        sample_invoice.tax_rate = Decimal("0.10")

        result = await update_use_case.execute(make_command())

        assert result.is_ok()
        assert result.value.title == "Website redesign v2"
        assert result.value.subtotal == Decimal("120.00")
        assert result.value.tax_amount == Decimal("12.00")
        assert result.value.total == Decimal("132.00")
        mock_item_repo.replace_for_document.assert_called_once()
        assert mock_item_repo.replace_for_document.call_args.args[0] == "doc_inv_1"
        mock_uow.commit.assert_called_once()

    async def test_non_draft_rejected_before_payload_validation(
        self, update_use_case, mock_item_repo, mock_uow
    ):
        """
        Given: Invoice already sent
        When: An update with an invalid payload (no items, no title) is executed
        Then: INVALID_STATE_TRANSITION, not VALIDATION_ERROR
        """
        result = await update_use_case.execute(make_command(title=None, items=[]))

        assert result.is_err()
        assert result.error.code == "INVALID_STATE_TRANSITION"
        assert result.error.message == "Only draft documents can be edited"
        mock_item_repo.replace_for_document.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_draft_without_items_rejected(self, update_use_case, sample_invoice):
        sample_invoice.status = "draft"

        result = await update_use_case.execute(make_command(items=[]))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "Add at least one item"

    async def test_document_not_found(self, update_use_case, mock_document_repo):
        mock_document_repo.get_by_id = AsyncMock(return_value=None)

        result = await update_use_case.execute(make_command())

        assert result.is_err()
        assert result.error.code == "DOCUMENT_NOT_FOUND"

    async def test_items_priced_by_catalog(self, mock_uow, mock_document_repo, mock_item_repo, sample_invoice):
        sample_invoice.status = "draft"
        sample_invoice.tax_rate = Decimal("0")
        catalog = MagicMock()
        catalog.price_items = AsyncMock(
            side_effect=lambda tenant_id, items: Return.ok(
                [i.model_copy(update={"title": "Hosting", "unit_price": Decimal("49.995")}) for i in items]
            )
        )
        use_case = UpdateDraftDocument(mock_uow, mock_document_repo, mock_item_repo, service_catalog=catalog)

        result = await use_case.execute(
            make_command(items=[LineItemDTO(service_id="svc_1", quantity=Decimal("2"))])
        )

        assert result.is_ok()
        assert result.value.items[0].title == "Hosting"
        assert result.value.total == Decimal("99.99")
        catalog.price_items.assert_called_once()
