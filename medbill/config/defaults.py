"""Default configuration values."""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    # Row grouping
    "row_tie_window_px": 5.0,
    "confidence_tie_epsilon": 0.01,
    "medicine_name_template": "Medicine {index}",

    # Placeholders for slots the detector did not fill
    "default_quantity": "1",
    "default_amount": "0",
    "default_hsn_code": "3004",

    # Detection model
    "detection_model": "data/models/medbill.pt",
    "detection_confidence_threshold": 0.4,  # 0.0 to 1.0
    "detection_iou_threshold": 0.3,  # 0.0 to 1.0

    # Billing
    "currency_symbol": "₹",
    "bill_number_prefix": "FM",
    "default_discount_percentage": 10,
    "default_cgst_percentage": 6,
    "default_sgst_percentage": 6,
    "item_ocr_confidence": 0.8,

    # Debug and Logging Settings
    "debug": False,
    "log_level": "INFO",
    "log_dir": "logs",
    "structured_logging": False,
    "enable_file_logging": False,
}
