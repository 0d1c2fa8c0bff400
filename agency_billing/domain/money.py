"""Monetary rules for billing documents

Line item valuation, tax calculation and document totals. All amounts are
Decimals rounded to 2 places with ROUND_HALF_UP.

Rules:
- Each line total is rounded before summing, so the subtotal equals the sum
  of the line totals shown on the document
- Exclusive tax is added on top of the subtotal
- Inclusive extraction recovers the tax portion from a tax-inclusive total
- total == subtotal + tax_amount exactly
- Quantities, unit prices and tax rates carry at most 4 decimal places,
  the precision they are stored with, so stored values reproduce the totals
"""

import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
ONE = Decimal("1")

# Decimal places stored for quantities, unit prices and tax rates
INPUT_SCALE = 4

CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


class LineItemError(ValueError):
    """Raised when line items or a tax rate cannot produce a valid total"""


class CurrencyError(ValueError):
    """Raised for a currency that is not a 3-letter ISO 4217 code"""


class PricedItem(Protocol):
    quantity: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def round2(amount) -> Decimal:
    """Round to cents (half up)"""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def has_scale(value: Decimal, places: int = INPUT_SCALE) -> bool:
    """True when value has no significant digits beyond places"""
    return value == value.quantize(Decimal(1).scaleb(-places))


def normalize_currency(code: str) -> str:
    """Upper-cased 3-letter currency code"""
    normalized = (code or "").strip().upper()
    if not CURRENCY_CODE.match(normalized):
        raise CurrencyError(f"currency must be a 3-letter ISO 4217 code, got {code!r}")
    return normalized


def validate_tax_rate(tax_rate) -> Decimal:
    rate = Decimal(str(tax_rate))
    if rate < 0 or rate >= ONE:
        raise LineItemError("tax_rate must be in the range [0, 1)")
    if not has_scale(rate):
        raise LineItemError(f"tax_rate supports at most {INPUT_SCALE} decimal places")
    return rate


def line_total(quantity, unit_price) -> Decimal:
    """round2(quantity * unit_price) for a single non-negative line"""
    if unit_price is None:
        raise LineItemError("Unit price is required")
    quantity = Decimal(str(quantity))
    unit_price = Decimal(str(unit_price))
    if quantity < 0:
        raise LineItemError("Quantity cannot be negative")
    if unit_price < 0:
        raise LineItemError("Unit price cannot be negative")
    if not has_scale(quantity):
        raise LineItemError(f"Quantity supports at most {INPUT_SCALE} decimal places")
    if not has_scale(unit_price):
        raise LineItemError(f"Unit price supports at most {INPUT_SCALE} decimal places")
    return round2(quantity * unit_price)


def value_line_items(items: Iterable[PricedItem]) -> Decimal:
    """
    Subtotal of a creatable document

    Raises:
        LineItemError: no items, a missing price, or a negative or
            over-precise quantity/price
    """
    items = list(items)
    if not items:
        raise LineItemError("Add at least one item")
    return sum((line_total(item.quantity, item.unit_price) for item in items), ZERO)


def exclusive_tax(subtotal, tax_rate) -> Decimal:
    """Tax added on top of the subtotal"""
    return round2(Decimal(str(subtotal)) * validate_tax_rate(tax_rate))


def extract_tax(total, tax_rate) -> Decimal:
    """Tax portion of a tax-inclusive total; 0 for a zero total or zero rate"""
    total = Decimal(str(total))
    rate = validate_tax_rate(tax_rate)
    if total == 0 or rate == 0:
        return ZERO
    return round2(total * rate / (ONE + rate))


def compute_totals(items: Iterable[PricedItem], tax_rate) -> DocumentTotals:
    subtotal = value_line_items(items)
    tax_amount = exclusive_tax(subtotal, tax_rate)
    return DocumentTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=subtotal + tax_amount,
    )
