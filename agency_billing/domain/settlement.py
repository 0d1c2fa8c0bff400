"""Settlement rules for invoices

One policy answers "is this document settled?" for every caller.
The derived signal is paid_amount >= total. A processor-confirmed
status of paid always takes precedence over the derived signal.
"""

from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from agency_billing.domain.billing_document import BillingDocument, InvoiceStatus
from agency_billing.domain.money import ZERO, round2


class SettlementStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class PaymentRejection(str, Enum):
    ALREADY_SETTLED = "already_settled"
    EXCEEDS_BALANCE = "exceeds_balance"


class SettlementPolicy:
    """Paid amount, balance due and settlement status of a document"""

    @staticmethod
    def paid_amount(amounts: Iterable[Decimal]) -> Decimal:
        return sum((Decimal(str(a)) for a in amounts), ZERO)

    @staticmethod
    def balance_due(total: Decimal, paid_amount: Decimal) -> Decimal:
        return max(ZERO, Decimal(str(total)) - Decimal(str(paid_amount)))

    @staticmethod
    def reject_payment(
        total: Decimal, paid_so_far: Decimal, amount: Decimal
    ) -> Optional[PaymentRejection]:
        """
        Check a new payment against the balance due

        Args:
            total: Stored document total
            paid_so_far: Sum of the other payments of the document
            amount: Requested payment amount (rounded before comparison)

        Returns:
            The rejection reason, or None when the payment fits
        """
        balance = SettlementPolicy.balance_due(total, paid_so_far)
        if balance <= 0:
            return PaymentRejection.ALREADY_SETTLED
        if round2(amount) > balance:
            return PaymentRejection.EXCEEDS_BALANCE
        return None

    @staticmethod
    def is_settled(document: BillingDocument, paid_amount: Decimal) -> bool:
        if document.status == InvoiceStatus.PAID.value:
            return True
        return Decimal(str(paid_amount)) >= Decimal(str(document.total))

    @staticmethod
    def status(document: BillingDocument, paid_amount: Decimal) -> SettlementStatus:
        if SettlementPolicy.is_settled(document, paid_amount):
            return SettlementStatus.PAID
        if paid_amount > 0:
            return SettlementStatus.PARTIALLY_PAID
        return SettlementStatus.UNPAID

    @staticmethod
    def outstanding(document: BillingDocument, paid_amount: Decimal) -> Decimal:
        """Balance still owed; 0 once the document is settled"""
        if SettlementPolicy.is_settled(document, paid_amount):
            return ZERO
        return SettlementPolicy.balance_due(document.total, paid_amount)
