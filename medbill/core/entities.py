"""Domain entities (data-only structures) used across the extraction pipeline."""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..utils.geometry import vertical_center, xywh_to_xyxy

XYXY = Tuple[float, float, float, float]  # (x1,y1,x2,y2)

_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


class FieldSlot(str, Enum):
    """Line-item columns of a printed bill."""
    MEDICINE_NAME = "medicine_name"
    BATCH_AND_EXPIRY = "batch_and_expiry"
    QUANTITY = "quantity"
    HSN_CODE = "hsn_code"
    AMOUNT = "amount"


class MetadataField(str, Enum):
    """Bill-level fields. Declaration order is the matching order."""
    CUSTOMER_NAME = "customer_name"
    CUSTOMER_PHONE = "customer_phone"
    CUSTOMER_ADDRESS = "customer_address"
    BILL_NUMBER = "bill_number"
    BILL_DATE = "bill_date"
    DOCTOR_NAME = "doctor_name"


@dataclass(frozen=True, slots=True)
class BoundingBox:
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    @property
    def vertical_center(self) -> float:
        return vertical_center(self.y, self.height)

    def to_xyxy(self) -> XYXY:
        return tuple(xywh_to_xyxy((self.x, self.y, self.width, self.height)))


@dataclass(frozen=True, slots=True)
class Detection:
    class_label: str
    bbox: BoundingBox
    confidence: float = 0.0
    value: Optional[str] = None
    class_id: Optional[int] = None  # detector class index, when known

    @property
    def is_malformed(self) -> bool:
        return not self.class_label


@dataclass(frozen=True, slots=True)
class ParsedNumber:
    """Typed view over a string-carried numeric field.

    ``raw`` keeps the original text; ``value`` is the leading decimal number
    of that text, or None when there is none (empty text, class-label
    placeholders and the like).
    """
    raw: Optional[str]
    value: Optional[Decimal]

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ParsedNumber":
        if raw is None:
            return cls(raw=None, value=None)
        match = _NUMERIC_PREFIX.match(raw)
        if not match:
            return cls(raw=raw, value=None)
        try:
            return cls(raw=raw, value=Decimal(match.group(1)))
        except InvalidOperation:
            return cls(raw=raw, value=None)

    @property
    def is_numeric(self) -> bool:
        return self.value is not None

    def or_zero(self) -> Decimal:
        return self.value if self.value is not None else Decimal("0")


_ROW_KEYS = {
    FieldSlot.MEDICINE_NAME: "medicineName",
    FieldSlot.BATCH_AND_EXPIRY: "batchAndExpiry",
    FieldSlot.QUANTITY: "quantity",
    FieldSlot.HSN_CODE: "hsnCode",
    FieldSlot.AMOUNT: "amount",
}

_METADATA_KEYS = {
    MetadataField.CUSTOMER_NAME: "customerName",
    MetadataField.CUSTOMER_PHONE: "customerPhone",
    MetadataField.CUSTOMER_ADDRESS: "customerAddress",
    MetadataField.BILL_NUMBER: "billNumber",
    MetadataField.BILL_DATE: "billDate",
    MetadataField.DOCTOR_NAME: "doctorName",
}


@dataclass(slots=True)
class Row:
    """One reconstructed line item."""
    medicine_name: Optional[str] = None
    batch_and_expiry: Optional[str] = None
    quantity: Optional[str] = None
    hsn_code: Optional[str] = None
    amount: Optional[str] = None

    def get(self, slot: FieldSlot) -> Optional[str]:
        return getattr(self, slot.value)

    def set(self, slot: FieldSlot, value: Optional[str]) -> None:
        setattr(self, slot.value, value)

    @property
    def parsed_quantity(self) -> ParsedNumber:
        return ParsedNumber.parse(self.quantity)

    @property
    def parsed_amount(self) -> ParsedNumber:
        return ParsedNumber.parse(self.amount)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {key: self.get(slot) for slot, key in _ROW_KEYS.items()}


@dataclass(slots=True)
class BillMetadata:
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    bill_number: Optional[str] = None
    bill_date: Optional[str] = None
    doctor_name: Optional[str] = None

    def get(self, name: MetadataField) -> Optional[str]:
        return getattr(self, name.value)

    def set(self, name: MetadataField, value: Optional[str]) -> None:
        setattr(self, name.value, value)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {key: self.get(name) for name, key in _METADATA_KEYS.items()}


@dataclass(slots=True)
class ExtractedBillData:
    """Final output handed to bill creation and persistence."""
    medicines: List[Row] = field(default_factory=list)
    metadata: BillMetadata = field(default_factory=BillMetadata)
    total_medicines: int = 0

    @classmethod
    def empty(cls) -> "ExtractedBillData":
        return cls(medicines=[], metadata=BillMetadata(), total_medicines=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medicines": [row.to_dict() for row in self.medicines],
            "metadata": self.metadata.to_dict(),
            "totalMedicines": self.total_medicines,
        }
