"""
Pharmacy bill extraction: turns field detections from a bill image into
medicine rows and bill details.
"""

import logging

__version__ = "1.0.0"

from .config.settings import Config, load_config, save_config
from .core.entities import Detection, BoundingBox, Row, BillMetadata, ExtractedBillData
from .extraction.assembler import BillExtractor, extract_bill_data

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Config", "load_config", "save_config",
    "Detection", "BoundingBox", "Row", "BillMetadata", "ExtractedBillData",
    "BillExtractor", "extract_bill_data",
]
