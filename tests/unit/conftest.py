import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from agency_billing.domain.billing_document import BillingDocument, DocumentKind
from agency_billing.domain.tenant import Tenant


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def sample_tenant():
    return Tenant(
        id="tenant_123",
        name="Acme Studio",
        subscription_plan="starter",
        currency="EUR",
        default_tax_rate=Decimal("0.2000"),
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow(),
    )


@pytest.fixture
def sample_invoice():
    """Sent invoice with total 100.00 and no tax"""
    return BillingDocument(
        id="doc_inv_1",
        tenant_id="tenant_123",
        kind=DocumentKind.INVOICE,
        status="sent",
        document_number="INV-2024-0001",
        title="Website redesign",
        currency="USD",
        tax_rate=Decimal("0"),
        subtotal=Decimal("100.00"),
        tax_amount=Decimal("0.00"),
        total=Decimal("100.00"),
        created_at=datetime(2024, 1, 15, 10, 0, 0),
        updated_at=datetime(2024, 1, 15, 10, 0, 0),
    )
