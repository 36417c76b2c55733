"""Detector class vocabulary: label normalization and classification.

Upstream detectors label the same bill column in slightly different ways
("Med Name", "med  name", "MEDICINE", ...). Every matching rule in the
pipeline runs on the normalized form produced by :func:`normalize`; the raw
label is only ever used as a placeholder value.
"""
from __future__ import annotations
import re
from typing import Dict, Optional, Tuple

from ..core.entities import FieldSlot, MetadataField

_WHITESPACE = re.compile(r"\s+")

ANCHOR_SYNONYMS = frozenset({
    "med name", "medname", "medicine name", "medicine", "med", "item", "product",
})

FIELD_CLASS_MAP: Dict[str, FieldSlot] = {
    "Med Name": FieldSlot.MEDICINE_NAME,
    "Batch Exp": FieldSlot.BATCH_AND_EXPIRY,
    "Quantity": FieldSlot.QUANTITY,
    "HSN Code": FieldSlot.HSN_CODE,
    "Amount": FieldSlot.AMOUNT,
}

# Substrings that mark a label as belonging to a medicine row. Used to keep
# line-item detections away from metadata and vice versa.
LINE_ITEM_PATTERNS: Tuple[str, ...] = ("med name", "batch exp", "quantity", "hsn code", "amount")

METADATA_PATTERNS: Dict[MetadataField, Tuple[str, ...]] = {
    MetadataField.CUSTOMER_NAME: ("customer name", "customer", "name", "patient name", "patient"),
    MetadataField.CUSTOMER_PHONE: ("phone", "mobile", "contact", "phone number", "mobile number"),
    MetadataField.CUSTOMER_ADDRESS: ("address", "location", "residence"),
    MetadataField.BILL_NUMBER: ("bill number", "bill no", "invoice number", "invoice no", "bill no."),
    MetadataField.BILL_DATE: ("date", "bill date", "invoice date", "dated"),
    MetadataField.DOCTOR_NAME: ("doctor", "doctor name", "prescribed by", "dr."),
}

_NORMALIZED_FIELD_MAP: Dict[str, FieldSlot] = {
    _WHITESPACE.sub(" ", key.strip().lower()): slot for key, slot in FIELD_CLASS_MAP.items()
}


def normalize(label: Optional[str]) -> str:
    """Trim, lower-case and collapse whitespace runs to a single space."""
    if not label:
        return ""
    return _WHITESPACE.sub(" ", label.strip().lower())


def is_anchor(label: Optional[str]) -> bool:
    """True when the label names the medicine column (a row captain)."""
    normalized = normalize(label)
    if not normalized:
        return False
    return (
        normalized in ANCHOR_SYNONYMS
        or "med name" in normalized
        or "medicine" in normalized
        or normalized.startswith("med")
    )


def classify(label: Optional[str]) -> Optional[FieldSlot]:
    """Map a label to its line-item slot, or None when it is not a row field."""
    normalized = normalize(label)
    if not normalized:
        return None

    exact = _NORMALIZED_FIELD_MAP.get(normalized)
    if exact is not None:
        return exact

    if "med name" in normalized or "medname" in normalized or "medicine name" in normalized:
        return FieldSlot.MEDICINE_NAME
    if "batch exp" in normalized or "batchexp" in normalized:
        return FieldSlot.BATCH_AND_EXPIRY
    if "quantity" in normalized or normalized == "qty":
        return FieldSlot.QUANTITY
    if "hsn code" in normalized or "hsncode" in normalized:
        return FieldSlot.HSN_CODE
    if "amount" in normalized or "price" in normalized:
        return FieldSlot.AMOUNT
    return None


def is_line_item_label(label: Optional[str]) -> bool:
    normalized = normalize(label)
    return any(pattern in normalized for pattern in LINE_ITEM_PATTERNS)


def matches_metadata_field(label: Optional[str], name: MetadataField) -> bool:
    normalized = normalize(label)
    if not normalized:
        return False
    return any(pattern in normalized for pattern in METADATA_PATTERNS[name])


def is_metadata_label(label: Optional[str]) -> bool:
    return any(matches_metadata_field(label, name) for name in METADATA_PATTERNS)
