"""Bill metadata extraction and medicine/metadata separation."""
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from ..core.entities import BillMetadata, Detection, MetadataField
from .vocabulary import is_line_item_label, is_metadata_label, matches_metadata_field

logger = logging.getLogger(__name__)


def extract_metadata(detections: Sequence[Detection], log: Optional[logging.Logger] = None) -> BillMetadata:
    """Fill bill metadata from the most confident matching detections.

    Detections are scanned by confidence, highest first. A detection fills at
    most one field (the first unfilled field, in declaration order, whose
    patterns it matches) and a filled field is never overwritten. Line-item
    labels are skipped entirely.
    """
    log = log or logger
    metadata = BillMetadata()

    ranked = sorted(detections, key=lambda d: -(d.confidence or 0.0))
    for det in ranked:
        label = det.class_label or ""
        if is_line_item_label(label):
            continue
        for name in MetadataField:
            if metadata.get(name) is None and matches_metadata_field(label, name):
                metadata.set(name, label)
                log.debug("Metadata %s <- %r (confidence %.2f)", name.value, label, det.confidence)
                break

    return metadata


def filter_medicine_detections(detections: Sequence[Detection]) -> List[Detection]:
    """Drop metadata detections; keep line items and unknown classes."""
    kept: List[Detection] = []
    for det in detections:
        label = det.class_label or ""
        if is_line_item_label(label) or not is_metadata_label(label):
            kept.append(det)
    return kept
