"""Bill scan pipeline service."""
from __future__ import annotations
import logging
import time
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np

from ..backends.base_backend import BaseBackend
from ..billing.items import BillItemInput, rows_to_bill_items
from ..config.settings import Config
from ..core.entities import ExtractedBillData
from ..core.exceptions import ModelError, ValidationError
from ..core.logging_config import CorrelationContext
from ..extraction.assembler import BillExtractor
from ..extraction.conversion import annotate_placeholder_values, parse_detection_response

logger = logging.getLogger(__name__)


class BillScanService:
    """Runs a detector backend over a bill image and extracts bill data."""

    def __init__(self, backend: Optional[BaseBackend], extractor: Optional[BillExtractor] = None,
                 config: Optional[Config] = None):
        self.backend = backend
        self.config = config or Config()
        self.extractor = extractor or BillExtractor.from_config(self.config)

    def scan(self, image: np.ndarray) -> ExtractedBillData:
        """Detect fields in ``image`` and extract rows and metadata."""
        if image is None or not isinstance(image, np.ndarray) or image.size == 0:
            raise ValidationError("Bill image is empty or not an image array")
        if self.backend is None or not self.backend.is_model_loaded():
            raise ModelError("No detector model loaded")

        with CorrelationContext():
            start_time = time.time()
            detections = self.backend.predict(
                image,
                conf=self.config.detection_confidence_threshold,
                iou=self.config.detection_iou_threshold,
            )
            latency_ms = int((time.time() - start_time) * 1000)
            logger.info("Detector found %d fields in %d ms", len(detections), latency_ms)
            if not detections:
                return ExtractedBillData.empty()
            return self.extractor.extract(detections)

    def scan_predictions(self, records: Union[Mapping[str, Any], Iterable[Mapping[str, Any]], None],
                         annotate: bool = False) -> ExtractedBillData:
        """Extract bill data from precomputed detector output.

        ``records`` is either a list of prediction records or a whole
        detection response, which is unwrapped first.
        """
        if isinstance(records, Mapping):
            records = parse_detection_response(records)
        records = list(records or [])
        if annotate:
            records = annotate_placeholder_values(records)
        with CorrelationContext():
            return self.extractor.extract(records)

    def to_bill_items(self, data: ExtractedBillData) -> List[BillItemInput]:
        return rows_to_bill_items(
            data.medicines,
            default_hsn_code=self.config.default_hsn_code,
            ocr_confidence=self.config.item_ocr_confidence,
        )
