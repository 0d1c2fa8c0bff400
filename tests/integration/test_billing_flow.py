"""Integration tests for documents, payments and plan limits on a real database"""

import asyncio
import pytest
from datetime import date, datetime
from decimal import Decimal

from agency_billing.adapter.repositories.billing_document_repository import SqlAlchemyBillingDocumentRepository
from agency_billing.adapter.repositories.catalog_service_repository import SqlAlchemyCatalogServiceRepository
from agency_billing.adapter.repositories.document_item_repository import SqlAlchemyDocumentItemRepository
from agency_billing.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from agency_billing.adapter.repositories.sequence_counter_repository import SqlAlchemySequenceCounterRepository
from agency_billing.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from agency_billing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agency_billing.app.services.plan_limiter import PlanLimiter
from agency_billing.app.services.sequence_allocator import SequenceAllocator
from agency_billing.app.services.service_catalog import ServiceCatalog
from agency_billing.app.use_cases.billing import (
    CreateDocument,
    UpdateDraftDocument,
    TransitionDocumentStatus,
    RecordPayment,
    RecordProcessorPayment,
    CreateService,
    UpdateService,
    ListPayments,
    GetDocumentBalance,
    DeletePayment,
    CreateDocumentCommandDTO,
    UpdateDocumentCommandDTO,
    TransitionStatusCommandDTO,
    RecordPaymentCommandDTO,
    ProcessorPaymentCommandDTO,
    CreateServiceCommandDTO,
    UpdateServiceCommandDTO,
    LineItemDTO,
)
from agency_billing.domain.billing_document import BillingDocument, DocumentKind
from agency_billing.domain.money import round2


def create_use_case(session, with_catalog=False):
    document_repo = SqlAlchemyBillingDocumentRepository(session)
    tenant_repo = SqlAlchemyTenantRepository(session)
    return CreateDocument(
        SqlAlchemyUnitOfWork(session),
        tenant_repo,
        document_repo,
        SqlAlchemyDocumentItemRepository(session),
        PlanLimiter(tenant_repo, document_repo),
        SequenceAllocator(SqlAlchemySequenceCounterRepository(session)),
        service_catalog=ServiceCatalog(SqlAlchemyCatalogServiceRepository(session)) if with_catalog else None,
    )


def invoice_command(tenant_id, **overrides):
    data = dict(
        tenant_id=tenant_id,
        kind=DocumentKind.INVOICE,
        title="Website redesign",
        items=[LineItemDTO(title="Design", quantity=Decimal("2"), unit_price=Decimal("50.00"))],
    )
    data.update(overrides)
    return CreateDocumentCommandDTO(**data)


async def send(session, tenant_id, document_id):
    result = await TransitionDocumentStatus(
        SqlAlchemyUnitOfWork(session), SqlAlchemyBillingDocumentRepository(session)
    ).execute(TransitionStatusCommandDTO(tenant_id=tenant_id, document_id=document_id, status="sent"))
    assert result.is_ok()
    return result.value


async def pay(session, tenant_id, document_id, amount, payment_date=date(2024, 2, 1)):
    return await RecordPayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    ).execute(
        RecordPaymentCommandDTO(
            tenant_id=tenant_id,
            document_id=document_id,
            amount=Decimal(amount),
            payment_date=payment_date,
        )
    )


@pytest.mark.asyncio
class TestDocumentPersistence:

    async def test_create_and_edit_draft(self, db_session, tenant):
        """
        Given: A tenant
        When: An invoice is created with tax 20% and edited with new items
        Then: Stored totals follow the items and the old items are gone
        """
        created = await create_use_case(db_session).execute(
            invoice_command(tenant.id, tax_rate=Decimal("0.20"))
        )
        assert created.is_ok()
        assert created.value.total == Decimal("120.00")
        assert created.value.document_number.endswith("-0001")

        updated = await UpdateDraftDocument(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyBillingDocumentRepository(db_session),
            SqlAlchemyDocumentItemRepository(db_session),
        ).execute(
            UpdateDocumentCommandDTO(
                tenant_id=tenant.id,
                document_id=created.value.document_id,
                title="Website redesign",
                items=[
                    LineItemDTO(title="Design", quantity=Decimal("1"), unit_price=Decimal("10.00")),
                    LineItemDTO(title="Build", quantity=Decimal("1"), unit_price=Decimal("15.00")),
                ],
            )
        )
        assert updated.is_ok()
        assert updated.value.subtotal == Decimal("25.00")
        assert updated.value.total == Decimal("30.00")

        items = await SqlAlchemyDocumentItemRepository(db_session).get_by_document_id(
            created.value.document_id
        )
        assert [item.title for item in items] == ["Design", "Build"]

    async def test_sub_cent_unit_price_survives_reload(self, db_session, session_factory, tenant):
        """
        Given: An invoice with 2 x 49.995
        When: The items are read back in a new session
        Then: The stored price keeps its third decimal and reproduces the line total
        """
        created = await create_use_case(db_session).execute(
            invoice_command(
                tenant.id,
                items=[LineItemDTO(title="Hosting", quantity=Decimal("2"), unit_price=Decimal("49.995"))],
            )
        )
        assert created.is_ok()
        assert created.value.total == Decimal("99.99")

        async with session_factory() as session:
            items = await SqlAlchemyDocumentItemRepository(session).get_by_document_id(
                created.value.document_id
            )
            await session.commit()

        assert len(items) == 1
        assert items[0].unit_price == Decimal("49.995")
        assert items[0].line_total == Decimal("99.99")
        assert round2(items[0].quantity * items[0].unit_price) == items[0].line_total

    async def test_documents_are_tenant_scoped(self, db_session, tenant):
        created = await create_use_case(db_session).execute(invoice_command(tenant.id))
        repo = SqlAlchemyBillingDocumentRepository(db_session)

        assert await repo.get_by_id(tenant.id, created.value.document_id) is not None
        assert await repo.get_by_id("tenant_other", created.value.document_id) is None


@pytest.mark.asyncio
class TestPaymentLedger:

    async def test_payments_never_exceed_total(self, db_session, tenant):
        """
        Given: Sent invoice of 100.00
        When: 30.00 and 70.00 are paid, then 1.00 more is attempted
        Then: The invoice is settled and the extra payment is rejected
        """
        invoice = (await create_use_case(db_session).execute(invoice_command(tenant.id))).value
        await send(db_session, tenant.id, invoice.document_id)

        assert (await pay(db_session, tenant.id, invoice.document_id, "30.00", date(2024, 2, 10))).is_ok()
        assert (await pay(db_session, tenant.id, invoice.document_id, "150.00")).error.code == "EXCEEDS_BALANCE"
        assert (await pay(db_session, tenant.id, invoice.document_id, "70.00", date(2024, 2, 5))).is_ok()
        assert (await pay(db_session, tenant.id, invoice.document_id, "1.00")).error.code == "ALREADY_SETTLED"

        balance = await GetDocumentBalance(
            SqlAlchemyBillingDocumentRepository(db_session), SqlAlchemyPaymentRepository(db_session)
        ).execute(tenant.id, invoice.document_id)
        assert balance.value.paid_amount == Decimal("100.00")
        assert balance.value.is_settled

        payments = await ListPayments(
            SqlAlchemyBillingDocumentRepository(db_session), SqlAlchemyPaymentRepository(db_session)
        ).execute(tenant.id, invoice.document_id)
        assert [p.payment_date for p in payments.value.payments] == [date(2024, 2, 5), date(2024, 2, 10)]

    async def test_delete_payment_reopens_balance(self, db_session, tenant):
        invoice = (await create_use_case(db_session).execute(invoice_command(tenant.id))).value
        payment = (await pay(db_session, tenant.id, invoice.document_id, "100.00")).value.payment

        result = await DeletePayment(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyBillingDocumentRepository(db_session),
            SqlAlchemyPaymentRepository(db_session),
        ).execute(tenant.id, payment.payment_id)

        assert result.is_ok()
        assert result.value.balance_due == Decimal("100.00")
        assert (await pay(db_session, tenant.id, invoice.document_id, "100.00")).is_ok()


@pytest.mark.asyncio
class TestPlanLimit:

    async def test_billable_invoices_this_month_count_against_limit(self, db_session, tenant):
        """
        Given: Freelancer plan (10/month) with 10 sent invoices this month
               plus drafts and a void invoice that do not count
        When: Another invoice is created
        Then: LIMIT_REACHED with limit 10; proposals are still allowed
        """
        now = datetime.utcnow()
        for i, status in enumerate(["sent"] * 9 + ["paid", "draft", "void"]):
            db_session.add(
                BillingDocument(
                    tenant_id=tenant.id,
                    kind=DocumentKind.INVOICE,
                    status=status,
                    document_number=f"SEED-{i:04d}",
                    title="Seed",
                    currency="USD",
                    tax_rate=Decimal("0"),
                    subtotal=Decimal("1.00"),
                    tax_amount=Decimal("0.00"),
                    total=Decimal("1.00"),
                    created_at=now,
                    updated_at=now,
                )
            )
        await db_session.commit()

        result = await create_use_case(db_session).execute(invoice_command(tenant.id))

        assert result.is_err()
        assert result.error.code == "LIMIT_REACHED"
        assert result.error.details == {"limit": 10}

        proposal = await create_use_case(db_session).execute(
            invoice_command(tenant.id, kind=DocumentKind.PROPOSAL)
        )
        assert proposal.is_ok()
        assert proposal.value.document_number.startswith("PRO-")


@pytest.mark.asyncio
class TestConcurrentPayments:

    async def test_concurrent_payments_cannot_overpay(self, db_session, session_factory, tenant):
        """
        Given: Sent invoice of 100.00
        When: Two payments of 60.00 are recorded at once, each in its own session
        Then: Exactly one succeeds and the other is rejected against the new balance
        """
        invoice = (await create_use_case(db_session).execute(invoice_command(tenant.id))).value
        await send(db_session, tenant.id, invoice.document_id)

        async def record():
            async with session_factory() as session:
                return await pay(session, tenant.id, invoice.document_id, "60.00")

        results = await asyncio.gather(record(), record())

        codes = sorted("OK" if r.is_ok() else r.error.code for r in results)
        assert codes == ["EXCEEDS_BALANCE", "OK"]

        async with session_factory() as session:
            paid = await SqlAlchemyPaymentRepository(session).sum_for_document(invoice.document_id)
            await session.commit()
        assert paid == Decimal("60.00")

    async def test_concurrent_processor_callbacks_record_one_payment(self, db_session, session_factory, tenant):
        """
        Given: Sent invoice of 100.00
        When: The processor delivers the same checkout twice at once
        Then: Both calls return the same payment and only one is stored
        """
        invoice = (await create_use_case(db_session).execute(invoice_command(tenant.id))).value
        await send(db_session, tenant.id, invoice.document_id)

        async def deliver():
            async with session_factory() as session:
                return await RecordProcessorPayment(
                    SqlAlchemyUnitOfWork(session),
                    SqlAlchemyBillingDocumentRepository(session),
                    SqlAlchemyPaymentRepository(session),
                ).execute(
                    ProcessorPaymentCommandDTO(
                        tenant_id=tenant.id,
                        document_id=invoice.document_id,
                        amount=Decimal("100.00"),
                        external_reference="cs_test_race",
                    )
                )

        first, second = await asyncio.gather(deliver(), deliver())

        assert first.is_ok() and second.is_ok()
        assert first.value.payment.payment_id == second.value.payment.payment_id

        async with session_factory() as session:
            payments = await SqlAlchemyPaymentRepository(session).list_by_document(invoice.document_id)
            await session.commit()
        assert len(payments) == 1
        assert payments[0].amount == Decimal("100.00")


@pytest.mark.asyncio
class TestServiceCatalog:

    async def test_items_are_priced_from_services(self, db_session, tenant):
        """
        Given: A service priced 80.00 per hour
        When: An invoice item names the service with no title or price
        Then: The item takes the service name and price; later price changes
              leave the invoice untouched
        """
        service = await CreateService(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyTenantRepository(db_session),
            SqlAlchemyCatalogServiceRepository(db_session),
        ).execute(
            CreateServiceCommandDTO(
                tenant_id=tenant.id, name="Consulting", default_unit_price=Decimal("80.00")
            )
        )
        assert service.is_ok()
        assert service.value.currency == "USD"
        service_id = service.value.service_id

        created = await create_use_case(db_session, with_catalog=True).execute(
            invoice_command(
                tenant.id,
                items=[
                    LineItemDTO(service_id=service_id, quantity=Decimal("1.5")),
                    LineItemDTO(service_id=service_id, title="Workshop", unit_price=Decimal("100.00")),
                ],
            )
        )
        assert created.is_ok()
        assert [(i.title, i.unit_price) for i in created.value.items] == [
            ("Consulting", Decimal("80.00")),
            ("Workshop", Decimal("100.00")),
        ]
        assert created.value.items[0].service_id == service_id
        assert created.value.total == Decimal("220.00")

        updated = await UpdateService(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyCatalogServiceRepository(db_session)
        ).execute(
            UpdateServiceCommandDTO(
                tenant_id=tenant.id, service_id=service_id, default_unit_price=Decimal("95.00")
            )
        )
        assert updated.is_ok()

        document = await SqlAlchemyBillingDocumentRepository(db_session).get_by_id(
            tenant.id, created.value.document_id
        )
        await db_session.commit()
        assert document.total == Decimal("220.00")

    async def test_inactive_service_cannot_price_items(self, db_session, tenant):
        repo = SqlAlchemyCatalogServiceRepository(db_session)
        service = await CreateService(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyTenantRepository(db_session), repo
        ).execute(
            CreateServiceCommandDTO(tenant_id=tenant.id, name="Retainer", default_unit_price=Decimal("500"))
        )
        await UpdateService(SqlAlchemyUnitOfWork(db_session), repo).execute(
            UpdateServiceCommandDTO(tenant_id=tenant.id, service_id=service.value.service_id, is_active=False)
        )

        result = await create_use_case(db_session, with_catalog=True).execute(
            invoice_command(tenant.id, items=[LineItemDTO(service_id=service.value.service_id)])
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert await repo.list_by_tenant(tenant.id, active_only=True) == []
        await db_session.commit()
