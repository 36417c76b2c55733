"""Conversion of raw detector records into :class:`Detection` objects."""
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..core.entities import BoundingBox, Detection
from ..core.exceptions import DetectionError
from .vocabulary import normalize

logger = logging.getLogger(__name__)

RawPrediction = Union[Mapping[str, Any], Detection]


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def convert_prediction(record: RawPrediction) -> Detection:
    """Reshape one flat ``{class, x, y, width, height, ...}`` record."""
    if isinstance(record, Detection):
        return record
    label = record.get("class")
    value = record.get("value")
    return Detection(
        class_label=str(label) if label is not None else "",
        bbox=BoundingBox(
            x=_as_float(record.get("x")),
            y=_as_float(record.get("y")),
            width=_as_float(record.get("width")),
            height=_as_float(record.get("height")),
        ),
        confidence=_as_float(record.get("confidence")),
        value=str(value) if value is not None else None,
        class_id=_as_int(record.get("class_id")),
    )


def convert_predictions(records: Optional[Iterable[RawPrediction]]) -> List[Detection]:
    """Reshape detector records; missing numeric fields default to 0."""
    if not records:
        return []
    detections = []
    for record in records:
        if not isinstance(record, (Mapping, Detection)):
            logger.debug("Skipping non-object detector record: %r", record)
            continue
        detections.append(convert_prediction(record))
    return detections


def placeholder_value(label: Optional[str]) -> str:
    """Class-derived stand-in for text the detector did not read."""
    normalized = normalize(label)
    if "med name" in normalized or "medicine" in normalized:
        return "Medicine Item"
    if "quantity" in normalized or normalized == "qty":
        return "1"
    if "amount" in normalized or "price" in normalized:
        return "0"
    if "hsn code" in normalized:
        return "3004"
    if "batch" in normalized or "exp" in normalized:
        return ""
    return label or ""


def annotate_placeholder_values(records: Iterable[RawPrediction]) -> List[RawPrediction]:
    """Return copies of ``records`` with a placeholder ``value`` where none is set.

    Records that are already :class:`Detection` objects are passed through.
    """
    annotated: List[RawPrediction] = []
    for record in records:
        if not isinstance(record, Mapping):
            annotated.append(record)
            continue
        copy = dict(record)
        if copy.get("value") is None:
            copy["value"] = placeholder_value(copy.get("class"))
        annotated.append(copy)
    return annotated


def parse_detection_response(payload: Any) -> List[Dict[str, Any]]:
    """Validate a detection-service response and return its predictions.

    Raises:
        DetectionError: if the payload is not an object, reports failure, or
            carries predictions that are not a list.
    """
    if not isinstance(payload, Mapping):
        raise DetectionError(f"Detection response must be an object, got {type(payload).__name__}")

    if payload.get("success") is False:
        raise DetectionError(payload.get("error") or "Detection service reported failure")

    predictions = payload.get("predictions")
    if not predictions:
        logger.info("Detection response contained no predictions")
        return []
    if not isinstance(predictions, list):
        raise DetectionError("Detection response 'predictions' must be a list")

    image = payload.get("image")
    if not isinstance(image, Mapping):
        image = {}
    logger.debug("Detection response: %d predictions, image %sx%s",
                 len(predictions), image.get("width", "N/A"), image.get("height", "N/A"))
    return [p for p in predictions if isinstance(p, Mapping)]
