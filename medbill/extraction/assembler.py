"""Bill data assembly: detections in, structured bill data out."""
from __future__ import annotations
import logging
from typing import Iterable, Optional

from ..core.entities import ExtractedBillData
from ..core.logging_config import CorrelationContext, get_correlation_id
from .conversion import RawPrediction, convert_predictions
from .grouping import RowCaptainGrouper
from .metadata import extract_metadata, filter_medicine_detections


class BillExtractor:
    """Runs metadata extraction and row grouping over one image's detections.

    The extractor holds configuration only; each :meth:`extract` call is
    independent, so one instance can be shared between workers.
    """

    def __init__(self, grouper: Optional[RowCaptainGrouper] = None,
                 logger: Optional[logging.Logger] = None):
        self.log = logger if logger is not None else logging.getLogger(__name__)
        self.grouper = grouper or RowCaptainGrouper(logger=self.log)

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> "BillExtractor":
        log = logger if logger is not None else logging.getLogger(__name__)
        return cls(grouper=RowCaptainGrouper.from_config(config, logger=log), logger=log)

    def extract(self, raw_detections: Optional[Iterable[RawPrediction]]) -> ExtractedBillData:
        with CorrelationContext(get_correlation_id()):
            detections = convert_predictions(raw_detections)
            self.log.debug("Extracting bill data from %d detections", len(detections))

            metadata = extract_metadata(detections, log=self.log)

            medicine_detections = filter_medicine_detections(detections)
            self.log.debug("Medicine detections after metadata filter: %d", len(medicine_detections))

            rows = self.grouper.group(medicine_detections)
            medicines = [row for row in rows if row.medicine_name is not None]
            if len(medicines) != len(rows):
                self.log.debug("Dropped %d rows without a medicine name", len(rows) - len(medicines))

            self.log.info("Extracted %d medicine rows from %d detections",
                          len(medicines), len(detections))
            return ExtractedBillData(
                medicines=medicines,
                metadata=metadata,
                total_medicines=len(medicines),
            )


def extract_bill_data(raw_detections: Optional[Iterable[RawPrediction]],
                      extractor: Optional[BillExtractor] = None) -> ExtractedBillData:
    """Extract medicine rows and bill metadata from raw detector records."""
    return (extractor or BillExtractor()).extract(raw_detections)
