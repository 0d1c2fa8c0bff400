"""Unit tests for SequenceAllocator"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from agency_billing.app.services.sequence_allocator import SequenceAllocator, format_document_number
from agency_billing.domain.billing_document import DocumentKind


def test_format_pads_to_four_digits():
    assert format_document_number("INV", 2024, 7) == "INV-2024-0007"
    assert format_document_number("INV", 2024, 12345) == "INV-2024-12345"


@pytest.mark.asyncio
class TestNextNumber:

    async def test_uses_counter_per_kind(self):
        """
        Given: Counter repository returns 3
        When: next_number is called for an invoice
        Then: Counter 'invoice' is incremented and the number is INV-<year>-0003
        """
        counter_repo = MagicMock()
        counter_repo.next_value = AsyncMock(return_value=3)
        allocator = SequenceAllocator(counter_repo)

        number = await allocator.next_number("tenant_123", DocumentKind.INVOICE, now=datetime(2024, 5, 1))

        assert number == "INV-2024-0003"
        counter_repo.next_value.assert_called_once_with("tenant_123", "invoice")

    async def test_custom_prefixes(self):
        counter_repo = MagicMock()
        counter_repo.next_value = AsyncMock(return_value=1)
        allocator = SequenceAllocator(
            counter_repo, prefixes={DocumentKind.INVOICE: "F", DocumentKind.PROPOSAL: "Q"}
        )

        number = await allocator.next_number("tenant_123", DocumentKind.PROPOSAL, now=datetime(2025, 1, 1))

        assert number == "Q-2025-0001"
        counter_repo.next_value.assert_called_once_with("tenant_123", "proposal")
