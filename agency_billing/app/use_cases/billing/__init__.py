"""Billing domain use cases"""
from .create_document import CreateDocument
from .update_draft_document import UpdateDraftDocument
from .get_document import GetDocument, ListDocuments
from .transition_document_status import TransitionDocumentStatus
from .convert_proposal import ConvertProposalToInvoice
from .record_payment import RecordPayment
from .record_processor_payment import RecordProcessorPayment
from .list_payments import ListPayments, GetDocumentBalance
from .update_payment import UpdatePayment, DeletePayment
from .subscription import GetPlanUsage, SyncSubscriptionPlan
from .reports import GetTaxReport, GetInvoiceStatusReport, GetPaymentsReport, GetRevenueOverview
from .catalog import CreateService, ListServices, UpdateService
from .dtos import (
    LineItemDTO,
    CreateDocumentCommandDTO,
    UpdateDocumentCommandDTO,
    TransitionStatusCommandDTO,
    RecordPaymentCommandDTO,
    UpdatePaymentCommandDTO,
    ProcessorPaymentCommandDTO,
    SyncSubscriptionPlanCommandDTO,
    ReportQueryDTO,
    DocumentItemDTO,
    DocumentResponseDTO,
    ListDocumentsResponseDTO,
    PaymentDTO,
    DocumentBalanceDTO,
    PaymentResponseDTO,
    ListPaymentsResponseDTO,
    PlanUsageResponseDTO,
    TenantPlanResponseDTO,
    TaxReportResponseDTO,
    StatusBucketDTO,
    InvoiceStatusReportDTO,
    PaymentReportQueryDTO,
    PaymentReportRowDTO,
    PaymentReportDTO,
    RevenueRange,
    RevenueOverviewQueryDTO,
    RevenueOverviewDTO,
    CreateServiceCommandDTO,
    UpdateServiceCommandDTO,
    ServiceDTO,
    ListServicesResponseDTO,
)

__all__ = [
    "CreateDocument",
    "UpdateDraftDocument",
    "GetDocument",
    "ListDocuments",
    "TransitionDocumentStatus",
    "ConvertProposalToInvoice",
    "RecordPayment",
    "RecordProcessorPayment",
    "ListPayments",
    "GetDocumentBalance",
    "UpdatePayment",
    "DeletePayment",
    "GetPlanUsage",
    "SyncSubscriptionPlan",
    "GetTaxReport",
    "GetInvoiceStatusReport",
    "GetPaymentsReport",
    "GetRevenueOverview",
    "CreateService",
    "ListServices",
    "UpdateService",
    "LineItemDTO",
    "CreateDocumentCommandDTO",
    "UpdateDocumentCommandDTO",
    "TransitionStatusCommandDTO",
    "RecordPaymentCommandDTO",
    "UpdatePaymentCommandDTO",
    "ProcessorPaymentCommandDTO",
    "SyncSubscriptionPlanCommandDTO",
    "ReportQueryDTO",
    "DocumentItemDTO",
    "DocumentResponseDTO",
    "ListDocumentsResponseDTO",
    "PaymentDTO",
    "DocumentBalanceDTO",
    "PaymentResponseDTO",
    "ListPaymentsResponseDTO",
    "PlanUsageResponseDTO",
    "TenantPlanResponseDTO",
    "TaxReportResponseDTO",
    "StatusBucketDTO",
    "InvoiceStatusReportDTO",
    "PaymentReportQueryDTO",
    "PaymentReportRowDTO",
    "PaymentReportDTO",
    "RevenueRange",
    "RevenueOverviewQueryDTO",
    "RevenueOverviewDTO",
    "CreateServiceCommandDTO",
    "UpdateServiceCommandDTO",
    "ServiceDTO",
    "ListServicesResponseDTO",
]
