"""Bill arithmetic on :class:`~decimal.Decimal`.

Quantities and prices arrive as strings typed or corrected by the user, so
every entry point accepts text and parses it leniently: the leading number
is used and anything unparseable counts as zero.
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from ..core.entities import ParsedNumber

Number = Union[Decimal, int, float, str, None]

CENT = Decimal("0.01")
UNIT = Decimal("1")
HUNDRED = Decimal("100")


def parse_decimal_safe(value: Number) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    return ParsedNumber.parse(value).or_zero()


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_item_total(quantity: Number, price_per_unit: Number) -> Decimal:
    return round_money(parse_decimal_safe(quantity) * parse_decimal_safe(price_per_unit))


def calculate_subtotal(totals: Iterable[Number]) -> Decimal:
    return sum((parse_decimal_safe(t) for t in totals), Decimal("0"))


def calculate_tax_amount(subtotal: Number, percentage: Number) -> Decimal:
    """Percentage of ``subtotal``, rounded to whole paise."""
    raw = parse_decimal_safe(subtotal) * parse_decimal_safe(percentage)
    return raw.quantize(UNIT, rounding=ROUND_HALF_UP) / HUNDRED


calculate_discount_amount = calculate_tax_amount


def calculate_grand_total(subtotal: Number, cgst_amount: Number, sgst_amount: Number) -> Decimal:
    return round_money(
        parse_decimal_safe(subtotal) + parse_decimal_safe(cgst_amount) + parse_decimal_safe(sgst_amount)
    )


@dataclass(frozen=True, slots=True)
class BillTotals:
    subtotal: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    grand_total: Decimal


def compute_bill_totals(item_totals: Iterable[Number], discount_percentage: Number = 0) -> BillTotals:
    """Subtotal, discount and payable total for a list of line totals."""
    subtotal = calculate_subtotal(item_totals)
    pct = parse_decimal_safe(discount_percentage)
    discount = calculate_discount_amount(subtotal, pct)
    return BillTotals(
        subtotal=subtotal,
        discount_percentage=pct,
        discount_amount=discount,
        grand_total=round_money(subtotal - discount),
    )


def format_currency(amount: Number, symbol: str = "₹") -> str:
    return f"{symbol}{round_money(parse_decimal_safe(amount)):.2f}"


def format_bill_number(prefix: str, counter: int, year: int) -> str:
    return f"{prefix}-{year}-{counter:04d}"
