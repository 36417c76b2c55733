"""Detection-to-row extraction pipeline."""

from .vocabulary import normalize, is_anchor, classify, is_line_item_label, is_metadata_label
from .grouping import RowCaptainGrouper, group_rows
from .metadata import extract_metadata, filter_medicine_detections
from .conversion import (
    convert_prediction, convert_predictions, placeholder_value,
    annotate_placeholder_values, parse_detection_response,
)
from .assembler import BillExtractor, extract_bill_data

__all__ = [
    "normalize", "is_anchor", "classify", "is_line_item_label", "is_metadata_label",
    "RowCaptainGrouper", "group_rows",
    "extract_metadata", "filter_medicine_detections",
    "convert_prediction", "convert_predictions", "placeholder_value",
    "annotate_placeholder_values", "parse_detection_response",
    "BillExtractor", "extract_bill_data",
]
