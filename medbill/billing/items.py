"""Conversion of extracted rows into editable bill items."""
from __future__ import annotations
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from ..core.entities import Row
from .calculations import calculate_item_total


@dataclass(slots=True)
class BillItemInput:
    """A bill line as presented for review before saving."""
    medicine_name: str
    quantity: str
    price_per_unit: str
    total: Decimal
    hsn_code: str = ""
    batch_no: str = ""
    expiry_date: str = ""
    ocr_confidence: float = 0.0

    def recalculate(self) -> None:
        self.total = calculate_item_total(self.quantity, self.price_per_unit)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["total"] = str(self.total)
        return data


def rows_to_bill_items(rows: Sequence[Row], default_hsn_code: str = "",
                       ocr_confidence: float = 0.8) -> List[BillItemInput]:
    """Map extracted rows to bill items, filling blanks with entry defaults.

    A row's amount is taken as the unit price; the item total is
    quantity times that price.
    """
    items: List[BillItemInput] = []
    for index, row in enumerate(rows, 1):
        quantity = row.quantity or "1"
        price = row.amount or "0"
        items.append(BillItemInput(
            medicine_name=row.medicine_name or f"Item {index}",
            quantity=quantity,
            price_per_unit=price,
            total=calculate_item_total(quantity, price),
            hsn_code=row.hsn_code or default_hsn_code,
            batch_no=row.batch_and_expiry or "",
            expiry_date="",
            ocr_confidence=ocr_confidence,
        ))
    return items
