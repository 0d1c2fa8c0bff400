"""Unit tests for UpdatePayment, DeletePayment and RecordProcessorPayment"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from agency_billing.app.use_cases.billing.update_payment import UpdatePayment, DeletePayment
from agency_billing.app.use_cases.billing.record_processor_payment import RecordProcessorPayment
from agency_billing.app.use_cases.billing.dtos import (
    UpdatePaymentCommandDTO,
    ProcessorPaymentCommandDTO,
)
from agency_billing.domain.payment import Payment, PaymentMethod


def make_payment(payment_id, amount, reference=None):
    return Payment(
        id=payment_id,
        document_id="doc_inv_1",
        amount=Decimal(amount),
        payment_date=date(2024, 2, 1),
        method=PaymentMethod.CASH,
        external_reference=reference,
        created_at=datetime.utcnow(),
    )


@pytest.fixture
def mock_document_repo(sample_invoice):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_invoice)
    repo.update = AsyncMock(side_effect=lambda document: document)
    return repo


@pytest.fixture
def existing_payment():
    return make_payment("pay_1", "30.00")


@pytest.fixture
def mock_payment_repo(existing_payment):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=existing_payment)
    repo.get_by_external_reference = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda payment: payment)
    repo.update = AsyncMock(side_effect=lambda payment: payment)
    repo.delete = AsyncMock()
    return repo


@pytest.mark.asyncio
class TestUpdatePayment:

    async def test_amount_checked_against_balance_excluding_itself(
        self, mock_uow, mock_document_repo, mock_payment_repo
    ):
        """
        Given: Invoice total 100.00, this payment 30.00, other payments 50.00
        When: This payment is changed to 50.00
        Then: Allowed (balance for this payment is 50.00), total paid becomes 100.00
        """
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("50.00"))
        use_case = UpdatePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(
            UpdatePaymentCommandDTO(tenant_id="tenant_123", payment_id="pay_1", amount=Decimal("50.00"))
        )

        assert result.is_ok()
        assert result.value.payment.amount == Decimal("50.00")
        assert result.value.balance.balance_due == Decimal("0.00")
        mock_payment_repo.sum_for_document.assert_called_once_with("doc_inv_1", exclude_payment_id="pay_1")
        mock_uow.commit.assert_called_once()

    async def test_amount_above_balance_excluding_itself(
        self, mock_uow, mock_document_repo, mock_payment_repo
    ):
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("50.00"))
        use_case = UpdatePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(
            UpdatePaymentCommandDTO(tenant_id="tenant_123", payment_id="pay_1", amount=Decimal("50.01"))
        )

        assert result.is_err()
        assert result.error.code == "EXCEEDS_BALANCE"
        mock_payment_repo.update.assert_not_called()

    async def test_no_fields(self, mock_uow, mock_document_repo, mock_payment_repo):
        use_case = UpdatePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(UpdatePaymentCommandDTO(tenant_id="tenant_123", payment_id="pay_1"))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.message == "No fields to update"

    async def test_note_only_update_keeps_amount(
        self, mock_uow, mock_document_repo, mock_payment_repo, existing_payment
    ):
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("0.00"))
        use_case = UpdatePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(
            UpdatePaymentCommandDTO(tenant_id="tenant_123", payment_id="pay_1", note="Wire ref 42")
        )

        assert result.is_ok()
        assert existing_payment.note == "Wire ref 42"
        assert existing_payment.amount == Decimal("30.00")
        assert result.value.balance.balance_due == Decimal("70.00")

    async def test_payment_of_other_tenant(self, mock_uow, mock_document_repo, mock_payment_repo):
        mock_document_repo.get_by_id = AsyncMock(return_value=None)
        use_case = UpdatePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(
            UpdatePaymentCommandDTO(tenant_id="tenant_other", payment_id="pay_1", note="x")
        )

        assert result.is_err()
        assert result.error.code == "PAYMENT_NOT_FOUND"


@pytest.mark.asyncio
class TestDeletePayment:

    async def test_delete_returns_remaining_balance(
        self, mock_uow, mock_document_repo, mock_payment_repo, existing_payment
    ):
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("0.00"))
        use_case = DeletePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute("tenant_123", "pay_1")

        assert result.is_ok()
        assert result.value.balance_due == Decimal("100.00")
        mock_payment_repo.delete.assert_called_once_with(existing_payment)
        mock_uow.commit.assert_called_once()

    async def test_unknown_payment(self, mock_uow, mock_document_repo, mock_payment_repo):
        mock_payment_repo.get_by_id = AsyncMock(return_value=None)
        use_case = DeletePayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute("tenant_123", "pay_missing")

        assert result.is_err()
        assert result.error.code == "PAYMENT_NOT_FOUND"


@pytest.mark.asyncio
class TestRecordProcessorPayment:

    def make_command(self, amount="100.00", reference="cs_test_1"):
        return ProcessorPaymentCommandDTO(
            tenant_id="tenant_123",
            document_id="doc_inv_1",
            amount=Decimal(amount),
            external_reference=reference,
        )

    async def test_records_card_payment_and_marks_paid(
        self, mock_uow, mock_document_repo, mock_payment_repo, sample_invoice
    ):
        """
        Given: Sent invoice of 100.00 with no payments
        When: The processor confirms a 100.00 payment
        Then: Card payment dated today, invoice status paid, single commit
        """
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("0.00"))
        use_case = RecordProcessorPayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(self.make_command())

        assert result.is_ok()
        assert result.value.payment.method == "card"
        assert result.value.payment.payment_date == datetime.utcnow().date()
        assert result.value.payment.external_reference == "cs_test_1"
        assert sample_invoice.status == "paid"
        assert sample_invoice.paid_at is not None
        assert result.value.balance.is_settled
        mock_uow.commit.assert_called_once()

    async def test_same_reference_is_idempotent(
        self, mock_uow, mock_document_repo, mock_payment_repo
    ):
        """
        Given: A payment with reference cs_test_1 already exists
        When: The processor sends the same reference again
        Then: The existing payment is returned and nothing is written
        """
        existing = make_payment("pay_9", "100.00", reference="cs_test_1")
        mock_payment_repo.get_by_external_reference = AsyncMock(return_value=existing)
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("100.00"))
        use_case = RecordProcessorPayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(self.make_command())

        assert result.is_ok()
        assert result.value.payment.payment_id == "pay_9"
        mock_payment_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_still_cannot_overpay(self, mock_uow, mock_document_repo, mock_payment_repo, sample_invoice):
        mock_payment_repo.sum_for_document = AsyncMock(return_value=Decimal("60.00"))
        use_case = RecordProcessorPayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(self.make_command(amount="100.00"))

        assert result.is_err()
        assert result.error.code == "EXCEEDS_BALANCE"
        assert sample_invoice.status == "sent"
        mock_payment_repo.create.assert_not_called()

    async def test_void_invoice(self, mock_uow, mock_document_repo, mock_payment_repo, sample_invoice):
        sample_invoice.status = "void"
        use_case = RecordProcessorPayment(mock_uow, mock_document_repo, mock_payment_repo)

        result = await use_case.execute(self.make_command())

        assert result.is_err()
        assert result.error.code == "INVALID_STATE_TRANSITION"
