"""Report API Routes"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from agency_billing.app.use_cases.billing.dtos import (
    ReportQueryDTO,
    TaxReportResponseDTO,
    InvoiceStatusReportDTO,
    PaymentReportQueryDTO,
    PaymentReportDTO,
    RevenueRange,
    RevenueOverviewQueryDTO,
    RevenueOverviewDTO,
)
from agency_billing.app.use_cases.billing.reports import (
    GetTaxReport,
    GetInvoiceStatusReport,
    GetPaymentsReport,
    GetRevenueOverview,
)
from agency_billing.adapter.repositories.billing_document_repository import SqlAlchemyBillingDocumentRepository
from agency_billing.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from agency_billing.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from agency_billing.depends import get_session, get_tenant_id
from agency_billing.api.error import client_error

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/tax",
    response_model=TaxReportResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def tax_report(
    start_date: date = Query(..., description="Inclusive start date"),
    end_date: date = Query(..., description="Inclusive end date"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Tax invoiced and collected in a period.

    - `tax_invoiced`: tax contained in invoices issued in the period
      (drafts and void invoices excluded)
    - `tax_collected`: tax share of payments received in the period
    """
    use_case = GetTaxReport(
        SqlAlchemyTenantRepository(session),
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    result = await use_case.execute(
        ReportQueryDTO(tenant_id=tenant_id, start_date=start_date, end_date=end_date)
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/invoice-status",
    response_model=InvoiceStatusReportDTO,
    status_code=status.HTTP_200_OK,
)
async def invoice_status_report(
    start_date: date = Query(..., description="Inclusive start date"),
    end_date: date = Query(..., description="Inclusive end date"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """Invoices issued in a period, grouped into unpaid, partially paid and paid."""
    use_case = GetInvoiceStatusReport(
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(
        ReportQueryDTO(tenant_id=tenant_id, start_date=start_date, end_date=end_date)
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/payments",
    response_model=PaymentReportDTO,
    status_code=status.HTTP_200_OK,
)
async def payments_report(
    start_date: date = Query(..., description="Inclusive start date"),
    end_date: date = Query(..., description="Inclusive end date"),
    method: Optional[str] = Query(None, description="cash, bank_transfer, card or other"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Payments received in a period, newest first, with totals per method.

    An unrecognized `method` is ignored rather than rejected.
    """
    use_case = GetPaymentsReport(
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(
        PaymentReportQueryDTO(
            tenant_id=tenant_id, start_date=start_date, end_date=end_date, method=method
        )
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value


@router.get(
    "/revenue-overview",
    response_model=RevenueOverviewDTO,
    status_code=status.HTTP_200_OK,
)
async def revenue_overview(
    range_: RevenueRange = Query(RevenueRange.THIS_MONTH, alias="range", description="this_month, last_month or custom"),
    start_date: Optional[date] = Query(None, description="Required for a custom range"),
    end_date: Optional[date] = Query(None, description="Required for a custom range"),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Invoiced and collected amounts in a period, and the balance still
    outstanding on all issued invoices.
    """
    use_case = GetRevenueOverview(
        SqlAlchemyTenantRepository(session),
        SqlAlchemyBillingDocumentRepository(session),
        SqlAlchemyPaymentRepository(session),
        default_currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    result = await use_case.execute(
        RevenueOverviewQueryDTO(
            tenant_id=tenant_id, range=range_, start_date=start_date, end_date=end_date
        )
    )

    if result.is_err():
        raise client_error(result.error)

    return result.value
