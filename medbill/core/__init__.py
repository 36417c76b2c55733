"""Core domain entities and constants."""

from .entities import (
    BoundingBox, Detection, FieldSlot, MetadataField, ParsedNumber,
    Row, BillMetadata, ExtractedBillData,
)
from .exceptions import ApplicationError, DetectionError, ConfigError, ModelError, ValidationError
from .constants import APP_NAME, VERSION, SUPPORTED_IMAGE_FORMATS

__all__ = [
    "BoundingBox", "Detection", "FieldSlot", "MetadataField", "ParsedNumber",
    "Row", "BillMetadata", "ExtractedBillData",
    "ApplicationError", "DetectionError", "ConfigError", "ModelError", "ValidationError",
    "APP_NAME", "VERSION", "SUPPORTED_IMAGE_FORMATS"
]
