"""Row-captain grouping: rebuild bill rows from unordered detections.

Medicine-name detections act as row anchors ("captains"). Every other
detection joins the anchor whose vertical center is nearest, and each row
then keeps one winning detection per column.
"""
from __future__ import annotations
import logging
from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence

from ..core.entities import Detection, FieldSlot, Row
from ..utils.geometry import vertical_distance
from .vocabulary import classify, is_anchor

DEFAULT_TIE_WINDOW_PX = 5.0
DEFAULT_CONFIDENCE_EPSILON = 0.01
DEFAULT_NAME_TEMPLATE = "Medicine {index}"
DEFAULT_PLACEHOLDERS: Dict[FieldSlot, str] = {
    FieldSlot.QUANTITY: "1",
    FieldSlot.AMOUNT: "0",
    FieldSlot.HSN_CODE: "3004",
}

# Slots filled from grouped detections, in assignment order.
_ROW_FIELD_ORDER = (
    FieldSlot.BATCH_AND_EXPIRY,
    FieldSlot.QUANTITY,
    FieldSlot.HSN_CODE,
    FieldSlot.AMOUNT,
)


class RowCaptainGrouper:
    """Nearest-anchor row grouping with deterministic tie-breaks."""

    def __init__(
        self,
        tie_window_px: float = DEFAULT_TIE_WINDOW_PX,
        confidence_epsilon: float = DEFAULT_CONFIDENCE_EPSILON,
        name_template: str = DEFAULT_NAME_TEMPLATE,
        placeholders: Optional[Dict[FieldSlot, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.tie_window_px = tie_window_px
        self.confidence_epsilon = confidence_epsilon
        self.name_template = name_template
        self.placeholders = dict(DEFAULT_PLACEHOLDERS)
        if placeholders:
            self.placeholders.update(placeholders)
        self.log = logger if logger is not None else logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> "RowCaptainGrouper":
        return cls(
            tie_window_px=float(config.row_tie_window_px),
            confidence_epsilon=float(config.confidence_tie_epsilon),
            name_template=config.medicine_name_template,
            placeholders={
                FieldSlot.QUANTITY: config.default_quantity,
                FieldSlot.AMOUNT: config.default_amount,
                FieldSlot.HSN_CODE: config.default_hsn_code,
            },
            logger=logger,
        )

    def group(self, detections: Sequence[Detection]) -> List[Row]:
        """Group detections into rows ordered top to bottom."""
        if not detections:
            return []

        valid: List[Detection] = []
        for det in detections:
            if det.is_malformed:
                self.log.debug("Skipping detection without class at y=%s", det.bbox.y)
                continue
            valid.append(det)

        anchors: List[Detection] = []
        others: List[Detection] = []
        for det in valid:
            (anchors if is_anchor(det.class_label) else others).append(det)
        self.log.debug("Partitioned %d detections: %d anchors, %d others",
                       len(valid), len(anchors), len(others))

        if not anchors:
            self.log.warning(
                "No medicine-name anchors among %d detections; falling back to a single row",
                len(valid)
            )
            return [self._fallback_row(valid)]

        # sorted() is stable, so anchors sharing a center keep input order
        anchors = sorted(anchors, key=lambda d: d.bbox.vertical_center)
        centers = [a.bbox.vertical_center for a in anchors]

        # buckets are indexed by the anchor's position in the sorted order
        buckets: List[List[Detection]] = [[] for _ in anchors]
        for det in others:
            idx = self._nearest_anchor(det.bbox.vertical_center, centers)
            buckets[idx].append(det)
            self.log.debug("Assigned %r (y=%s) to row %d", det.class_label, det.bbox.y, idx + 1)

        rows: List[Row] = []
        for idx, (anchor, bucket) in enumerate(zip(anchors, buckets)):
            row = Row(medicine_name=self.name_template.format(index=idx + 1))
            self._fill_row(row, anchor, bucket)
            rows.append(row)
        return rows

    def _nearest_anchor(self, center: float, anchor_centers: Sequence[float]) -> int:
        best_idx = 0
        min_distance = float("inf")
        best_center = float("inf")
        for idx, anchor_center in enumerate(anchor_centers):
            distance = vertical_distance(center, anchor_center)
            if abs(distance - min_distance) < self.tie_window_px:
                # near-equal distances resolve to the anchor above
                if anchor_center < best_center:
                    best_idx, min_distance, best_center = idx, distance, anchor_center
            elif distance < min_distance:
                best_idx, min_distance, best_center = idx, distance, anchor_center
        return best_idx

    def _compare_candidates(self, a: Detection, b: Detection) -> float:
        conf_diff = (b.confidence or 0.0) - (a.confidence or 0.0)
        if abs(conf_diff) > self.confidence_epsilon:
            return conf_diff
        return a.bbox.x - b.bbox.x

    def _pick_winner(self, candidates: List[Detection]) -> Detection:
        return sorted(candidates, key=cmp_to_key(self._compare_candidates))[0]

    def _fill_row(self, row: Row, anchor: Detection, bucket: List[Detection]) -> None:
        by_slot: Dict[FieldSlot, List[Detection]] = {}
        for det in bucket:
            slot = classify(det.class_label)
            if slot is not None:
                by_slot.setdefault(slot, []).append(det)

        if anchor.value:
            row.medicine_name = anchor.value

        for slot in _ROW_FIELD_ORDER:
            candidates = by_slot.get(slot)
            if not candidates:
                continue
            winner = self._pick_winner(candidates)
            if winner.value:
                row.set(slot, winner.value)
            else:
                row.set(slot, self.placeholders.get(slot, winner.class_label))

    def _fallback_row(self, detections: Sequence[Detection]) -> Row:
        row = Row()
        for det in detections:
            slot = classify(det.class_label)
            if slot is not None and row.get(slot) is None:
                row.set(slot, det.class_label)
        return row


def group_rows(detections: Sequence[Detection], grouper: Optional[RowCaptainGrouper] = None) -> List[Row]:
    """Group detections into rows with default (or the given) grouper settings."""
    return (grouper or RowCaptainGrouper()).group(detections)
