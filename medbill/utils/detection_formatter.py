"""
Text formatting for extracted bill data and raw detections.

Used by the command line to print a readable summary of what was found on a
bill image.
"""

import logging
from typing import List, Optional, Sequence

from ..billing.calculations import (
    Number,
    calculate_grand_total,
    calculate_item_total,
    calculate_tax_amount,
    compute_bill_totals,
    format_currency,
    parse_decimal_safe,
)
from ..core.entities import Detection, ExtractedBillData, Row

logger = logging.getLogger(__name__)

_METADATA_LABELS = (
    ("customerName", "Customer"),
    ("customerPhone", "Phone"),
    ("customerAddress", "Address"),
    ("billNumber", "Bill No."),
    ("billDate", "Date"),
    ("doctorName", "Doctor"),
)

BOX_WIDTH = 45


def _box_line(text: str) -> str:
    return "│ " + text[:BOX_WIDTH - 2].ljust(BOX_WIDTH - 2) + "│"


def _percent(value: Number) -> str:
    return format(parse_decimal_safe(value).normalize(), "f")


def format_totals(item_totals: Sequence[Number], currency_symbol: str = "₹",
                  discount_percentage: Number = 0, cgst_percentage: Number = 0,
                  sgst_percentage: Number = 0) -> List[str]:
    """Subtotal, discount, CGST/SGST and grand total lines; tax is charged after discount."""
    totals = compute_bill_totals(item_totals, discount_percentage)
    lines = [f"Subtotal: {format_currency(totals.subtotal, currency_symbol)}"]
    if totals.discount_amount:
        lines.append(f"Discount ({_percent(totals.discount_percentage)}%): "
                     f"-{format_currency(totals.discount_amount, currency_symbol)}")

    taxable = totals.grand_total
    cgst = calculate_tax_amount(taxable, cgst_percentage)
    sgst = calculate_tax_amount(taxable, sgst_percentage)
    if cgst:
        lines.append(f"CGST ({_percent(cgst_percentage)}%): {format_currency(cgst, currency_symbol)}")
    if sgst:
        lines.append(f"SGST ({_percent(sgst_percentage)}%): {format_currency(sgst, currency_symbol)}")

    grand_total = calculate_grand_total(taxable, cgst, sgst)
    lines.append(f"Grand Total: {format_currency(grand_total, currency_symbol)}")
    return lines


def format_extracted_bill(data: ExtractedBillData, currency_symbol: str = "₹",
                          discount_percentage: Number = 0, cgst_percentage: Number = 0,
                          sgst_percentage: Number = 0, bill_number: Optional[str] = None) -> str:
    """
    Format extracted bill data for display.

    Args:
        data: Result of bill extraction
        currency_symbol: Prefix used for money amounts
        discount_percentage: Discount taken off the subtotal
        cgst_percentage: Central GST charged on the discounted amount
        sgst_percentage: State GST charged on the discounted amount
        bill_number: Number the bill would be saved under, shown as a draft

    Returns:
        Formatted string with bill details, one box per medicine row
    """
    try:
        output_parts = ["🧾 Extracted Bill:", ""]
        if bill_number:
            output_parts.insert(1, f"  Draft Bill No.: {bill_number}")

        metadata = data.metadata.to_dict()
        found = [(label, metadata[key]) for key, label in _METADATA_LABELS if metadata.get(key)]
        if found:
            for label, value in found:
                output_parts.append(f"  {label}: {value}")
            output_parts.append("")

        output_parts.append(f"💊 Medicines Found: {data.total_medicines}")
        output_parts.append("")

        if not data.medicines:
            output_parts.append("No medicine rows were detected.")
            return "\n".join(output_parts)

        totals = []
        for i, row in enumerate(data.medicines, 1):
            output_parts.append(format_row(row, i, currency_symbol))
            totals.append(calculate_item_total(row.quantity, row.amount))

        output_parts.append("")
        output_parts.extend(format_totals(totals, currency_symbol, discount_percentage,
                                          cgst_percentage, sgst_percentage))
        return "\n".join(output_parts)

    except Exception as e:
        logger.error(f"Failed to format bill data: {e}")
        return f"🧾 Extracted Bill:\n❌ Error formatting bill data: {str(e)}"


def format_row(row: Row, index: int, currency_symbol: str = "₹") -> str:
    amount = row.parsed_amount
    amount_text = format_currency(amount.value, currency_symbol) if amount.is_numeric else (row.amount or "-")
    box_parts = [
        "┌" + "─" * BOX_WIDTH + "┐",
        _box_line(f"{index}. {row.medicine_name or '-'}"),
        _box_line(f"Batch/Exp: {row.batch_and_expiry or '-'}"),
        _box_line(f"Qty: {row.quantity or '-'}   HSN: {row.hsn_code or '-'}"),
        _box_line(f"Amount: {amount_text}"),
        "└" + "─" * BOX_WIDTH + "┘",
    ]
    return "\n".join(box_parts)


def format_detection_summary(detections: Sequence[Detection]) -> str:
    """Summarize raw detections as one line per detection, top to bottom."""
    try:
        if not detections:
            return "🔍 No bill fields detected."

        lines: List[str] = [f"🔍 Detected Fields: {len(detections)}"]
        for det in sorted(detections, key=lambda d: d.bbox.vertical_center):
            label = det.class_label or f"class_{det.class_id}"
            line = f"  • {label} ({det.confidence * 100:.1f}%) at y={det.bbox.vertical_center:.0f}"
            if det.value:
                line += f": {det.value}"
            lines.append(line)
        return "\n".join(lines)

    except Exception as e:
        logger.error(f"Failed to format detections: {e}")
        return f"🔍 Detected Fields:\n❌ Error formatting detections: {str(e)}"
