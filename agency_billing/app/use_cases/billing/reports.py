"""Report Use Cases

GetTaxReport, GetInvoiceStatusReport, GetPaymentsReport and
GetRevenueOverview.

Reports cover a tenant's issued invoices. Drafts and void invoices
never appear in reports; an invoice's issue date is sent_at, falling back
to created_at.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from agency_billing.libs.result import Result, Return, Error
from agency_billing.app.errors import ErrorCode
from agency_billing.app.repositories.billing_document_repository import BillingDocumentRepository
from agency_billing.app.repositories.payment_repository import PaymentRepository
from agency_billing.app.repositories.tenant_repository import TenantRepository
from agency_billing.domain.billing_document import BillingDocument, DocumentKind, InvoiceStatus
from agency_billing.domain.money import ZERO, extract_tax, round2
from agency_billing.domain.payment import PaymentMethod
from agency_billing.domain.settlement import SettlementPolicy, SettlementStatus
from .dtos import (
    ReportQueryDTO,
    TaxReportResponseDTO,
    StatusBucketDTO,
    InvoiceStatusReportDTO,
    PaymentReportQueryDTO,
    PaymentReportRowDTO,
    PaymentReportDTO,
    RevenueRange,
    RevenueOverviewQueryDTO,
    RevenueOverviewDTO,
)

NON_REPORTABLE_STATUSES = (InvoiceStatus.DRAFT.value, InvoiceStatus.VOID.value)


def invalid_range(query: ReportQueryDTO) -> Optional[Error]:
    if query.start_date > query.end_date:
        return Error(
            code=ErrorCode.VALIDATION_ERROR,
            message="start_date must be before end_date",
        )
    return None


def issued_in_range(invoices: List[BillingDocument], query: ReportQueryDTO) -> List[BillingDocument]:
    return [
        invoice
        for invoice in invoices
        if query.start_date <= invoice.issue_date() <= query.end_date
    ]


class GetTaxReport:
    """
    Use Case: Tax invoiced and collected in a period

    Business Rules:
    1. tax_invoiced = sum of tax extracted from the totals of invoices
       issued in the period
    2. tax_collected = each payment dated in the period times its invoice's
       tax share (tax / total), summed then rounded
    3. Payments count by payment_date, whenever their invoice was issued
    """

    def __init__(
        self,
        tenant_repo: TenantRepository,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
        default_currency: str = "USD",
    ):
        self.tenant_repo = tenant_repo
        self.document_repo = document_repo
        self.payment_repo = payment_repo
        self.default_currency = default_currency

    async def execute(self, query: ReportQueryDTO) -> Result[TaxReportResponseDTO]:
        error = invalid_range(query)
        if error:
            return Return.err(error)

        try:
            tenant = await self.tenant_repo.get_by_id(query.tenant_id)
            currency = (tenant.currency if tenant else None) or self.default_currency

            invoices = await self.document_repo.list_excluding_statuses(
                query.tenant_id, DocumentKind.INVOICE, NON_REPORTABLE_STATUSES
            )
            tax_by_invoice = {inv.id: extract_tax(inv.total, inv.tax_rate) for inv in invoices}

            tax_invoiced = sum(
                (tax_by_invoice[inv.id] for inv in issued_in_range(invoices, query)), ZERO
            )

            tax_collected = Decimal("0")
            if invoices:
                by_id = {inv.id: inv for inv in invoices}
                payments = await self.payment_repo.list_by_documents(
                    list(by_id), start_date=query.start_date, end_date=query.end_date
                )
                for payment in payments:
                    invoice = by_id.get(payment.document_id)
                    if invoice is None or invoice.total == 0:
                        continue
                    tax_collected += (
                        Decimal(str(payment.amount)) * tax_by_invoice[invoice.id] / Decimal(str(invoice.total))
                    )

            return Return.ok(
                TaxReportResponseDTO(
                    start_date=query.start_date,
                    end_date=query.end_date,
                    currency=currency,
                    tax_invoiced=tax_invoiced,
                    tax_collected=round2(tax_collected),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="TAX_REPORT_FAILED",
                    message="Failed to build tax report",
                    reason=str(e),
                )
            )


class GetInvoiceStatusReport:
    """
    Use Case: Invoices issued in a period grouped by settlement status

    Each invoice lands in exactly one bucket (unpaid, partially_paid, paid),
    decided by SettlementPolicy over all of its payments.
    """

    def __init__(
        self,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
    ):
        self.document_repo = document_repo
        self.payment_repo = payment_repo

    async def execute(self, query: ReportQueryDTO) -> Result[InvoiceStatusReportDTO]:
        error = invalid_range(query)
        if error:
            return Return.err(error)

        try:
            invoices = issued_in_range(
                await self.document_repo.list_excluding_statuses(
                    query.tenant_id, DocumentKind.INVOICE, NON_REPORTABLE_STATUSES
                ),
                query,
            )

            paid_by_invoice: Dict[str, Decimal] = defaultdict(lambda: ZERO)
            if invoices:
                payments = await self.payment_repo.list_by_documents([inv.id for inv in invoices])
                for payment in payments:
                    paid_by_invoice[payment.document_id] += Decimal(str(payment.amount))

            buckets = {status: StatusBucketDTO() for status in SettlementStatus}
            for invoice in invoices:
                bucket = buckets[SettlementPolicy.status(invoice, paid_by_invoice[invoice.id])]
                bucket.count += 1
                bucket.total_amount += Decimal(str(invoice.total))

            return Return.ok(
                InvoiceStatusReportDTO(
                    start_date=query.start_date,
                    end_date=query.end_date,
                    unpaid=buckets[SettlementStatus.UNPAID],
                    partially_paid=buckets[SettlementStatus.PARTIALLY_PAID],
                    paid=buckets[SettlementStatus.PAID],
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="INVOICE_STATUS_REPORT_FAILED",
                    message="Failed to build invoice status report",
                    reason=str(e),
                )
            )


class GetPaymentsReport:
    """
    Use Case: Payments received in a period

    Business Rules:
    1. Payments count by payment_date, on issued invoices that are not void
    2. An optional method filter applies only when it names a known method
    3. Rows are newest first; totals are split by method
    """

    def __init__(
        self,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
    ):
        self.document_repo = document_repo
        self.payment_repo = payment_repo

    async def execute(self, query: PaymentReportQueryDTO) -> Result[PaymentReportDTO]:
        error = invalid_range(query)
        if error:
            return Return.err(error)

        try:
            invoices = await self.document_repo.list_excluding_statuses(
                query.tenant_id, DocumentKind.INVOICE, NON_REPORTABLE_STATUSES
            )
            by_id = {inv.id: inv for inv in invoices}

            payments = []
            if by_id:
                payments = await self.payment_repo.list_by_documents(
                    list(by_id), start_date=query.start_date, end_date=query.end_date
                )

            known_methods = {m.value for m in PaymentMethod}
            if query.method in known_methods:
                payments = [p for p in payments if PaymentMethod(p.method).value == query.method]

            payments = sorted(payments, key=lambda p: p.payment_date, reverse=True)

            rows = []
            breakdown: Dict[str, Decimal] = defaultdict(lambda: ZERO)
            for payment in payments:
                invoice = by_id[payment.document_id]
                amount = Decimal(str(payment.amount))
                method = PaymentMethod(payment.method).value
                breakdown[method] += amount
                rows.append(
                    PaymentReportRowDTO(
                        payment_id=payment.id,
                        payment_date=payment.payment_date,
                        document_id=invoice.id,
                        document_number=invoice.document_number,
                        client_id=invoice.client_id,
                        amount=amount,
                        method=method,
                        note=payment.note,
                    )
                )

            return Return.ok(
                PaymentReportDTO(
                    start_date=query.start_date,
                    end_date=query.end_date,
                    payments=rows,
                    total_collected=sum(breakdown.values(), ZERO),
                    breakdown_by_method=dict(breakdown),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="PAYMENTS_REPORT_FAILED",
                    message="Failed to build payments report",
                    reason=str(e),
                )
            )


def revenue_period(query: RevenueOverviewQueryDTO, today: date) -> Tuple[Optional[Tuple[date, date]], Optional[Error]]:
    """Resolve the overview range to inclusive (start, end) dates"""
    if query.range == RevenueRange.CUSTOM:
        if query.start_date is None or query.end_date is None:
            return None, Error(
                code=ErrorCode.VALIDATION_ERROR,
                message="start_date and end_date are required for a custom range",
            )
        if query.start_date > query.end_date:
            return None, Error(
                code=ErrorCode.VALIDATION_ERROR,
                message="start_date must be before end_date",
            )
        return (query.start_date, query.end_date), None

    first_of_month = today.replace(day=1)
    if query.range == RevenueRange.LAST_MONTH:
        last_month_end = first_of_month - timedelta(days=1)
        return (last_month_end.replace(day=1), last_month_end), None

    return (first_of_month, today), None


class GetRevenueOverview:
    """
    Use Case: Invoiced, collected and outstanding amounts

    Business Rules:
    1. Period is this_month (1st to today), last_month or custom dates
    2. total_invoiced = totals of invoices issued in the period
    3. total_collected = payments dated in the period
    4. outstanding = balance due over all issued invoices regardless of
       period; settled invoices owe nothing (SettlementPolicy)
    """

    def __init__(
        self,
        tenant_repo: TenantRepository,
        document_repo: BillingDocumentRepository,
        payment_repo: PaymentRepository,
        default_currency: str = "USD",
    ):
        self.tenant_repo = tenant_repo
        self.document_repo = document_repo
        self.payment_repo = payment_repo
        self.default_currency = default_currency

    async def execute(
        self, query: RevenueOverviewQueryDTO, today: Optional[date] = None
    ) -> Result[RevenueOverviewDTO]:
        period, error = revenue_period(query, today or date.today())
        if error:
            return Return.err(error)
        start_date, end_date = period

        try:
            tenant = await self.tenant_repo.get_by_id(query.tenant_id)
            currency = (tenant.currency if tenant else None) or self.default_currency

            invoices = await self.document_repo.list_excluding_statuses(
                query.tenant_id, DocumentKind.INVOICE, NON_REPORTABLE_STATUSES
            )

            total_invoiced = sum(
                (
                    Decimal(str(inv.total))
                    for inv in invoices
                    if start_date <= inv.issue_date() <= end_date
                ),
                ZERO,
            )

            total_collected = ZERO
            outstanding = ZERO
            if invoices:
                payments = await self.payment_repo.list_by_documents([inv.id for inv in invoices])

                paid_by_invoice: Dict[str, Decimal] = defaultdict(lambda: ZERO)
                for payment in payments:
                    amount = Decimal(str(payment.amount))
                    paid_by_invoice[payment.document_id] += amount
                    if start_date <= payment.payment_date <= end_date:
                        total_collected += amount

                outstanding = sum(
                    (SettlementPolicy.outstanding(inv, paid_by_invoice[inv.id]) for inv in invoices),
                    ZERO,
                )

            return Return.ok(
                RevenueOverviewDTO(
                    start_date=start_date,
                    end_date=end_date,
                    currency=currency,
                    total_invoiced=total_invoiced,
                    total_collected=total_collected,
                    outstanding=outstanding,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="REVENUE_OVERVIEW_FAILED",
                    message="Failed to build revenue overview",
                    reason=str(e),
                )
            )
