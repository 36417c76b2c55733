"""Bill arithmetic and bill item helpers."""

from .calculations import (
    BillTotals, parse_decimal_safe, calculate_item_total, calculate_subtotal,
    calculate_tax_amount, calculate_discount_amount, calculate_grand_total,
    compute_bill_totals, format_currency, format_bill_number,
)
from .items import BillItemInput, rows_to_bill_items

__all__ = [
    "BillTotals", "parse_decimal_safe", "calculate_item_total", "calculate_subtotal",
    "calculate_tax_amount", "calculate_discount_amount", "calculate_grand_total",
    "compute_bill_totals", "format_currency", "format_bill_number",
    "BillItemInput", "rows_to_bill_items",
]
