"""Configuration dataclass and loading utilities.

Provides a strongly-typed configuration object that can be injected into the
extractor, the scan service and the CLI instead of relying on a global
module-level dictionary.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional
import json, os, logging
from .defaults import DEFAULT_CONFIG
from .env_config import load_environment_config, EnvironmentConfig, EnvironmentConfigError

logger = logging.getLogger(__name__)

_NUMERIC_RANGES = {
    "row_tie_window_px": (0.0, None),
    "confidence_tie_epsilon": (0.0, 1.0),
    "detection_confidence_threshold": (0.0, 1.0),
    "detection_iou_threshold": (0.0, 1.0),
    "default_discount_percentage": (0, 100),
    "default_cgst_percentage": (0, 100),
    "default_sgst_percentage": (0, 100),
    "item_ocr_confidence": (0.0, 1.0),
}

_STRING_KEYS = (
    "medicine_name_template", "default_quantity", "default_amount", "default_hsn_code",
    "detection_model", "currency_symbol", "bill_number_prefix", "log_level", "log_dir",
)

_BOOL_KEYS = ("debug", "structured_logging", "enable_file_logging")


@dataclass(slots=True)
class Config:
    # Row grouping
    row_tie_window_px: float = DEFAULT_CONFIG["row_tie_window_px"]
    confidence_tie_epsilon: float = DEFAULT_CONFIG["confidence_tie_epsilon"]
    medicine_name_template: str = DEFAULT_CONFIG["medicine_name_template"]

    # Placeholders
    default_quantity: str = DEFAULT_CONFIG["default_quantity"]
    default_amount: str = DEFAULT_CONFIG["default_amount"]
    default_hsn_code: str = DEFAULT_CONFIG["default_hsn_code"]

    # Detection model
    detection_model: str = DEFAULT_CONFIG["detection_model"]
    detection_confidence_threshold: float = DEFAULT_CONFIG["detection_confidence_threshold"]
    detection_iou_threshold: float = DEFAULT_CONFIG["detection_iou_threshold"]

    # Billing
    currency_symbol: str = DEFAULT_CONFIG["currency_symbol"]
    bill_number_prefix: str = DEFAULT_CONFIG["bill_number_prefix"]
    default_discount_percentage: float = DEFAULT_CONFIG["default_discount_percentage"]
    default_cgst_percentage: float = DEFAULT_CONFIG["default_cgst_percentage"]
    default_sgst_percentage: float = DEFAULT_CONFIG["default_sgst_percentage"]
    item_ocr_confidence: float = DEFAULT_CONFIG["item_ocr_confidence"]

    # Debug and logging
    debug: bool = DEFAULT_CONFIG["debug"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_dir: str = DEFAULT_CONFIG["log_dir"]
    structured_logging: bool = DEFAULT_CONFIG["structured_logging"]
    enable_file_logging: bool = DEFAULT_CONFIG["enable_file_logging"]

    # Arbitrary extra values retained for forward compatibility
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # merge extra keys at top-level for saving
        extra = d.pop("extra", {})
        d.update(extra)
        return d

    def get(self, key: str, default: Any = None) -> Any:
        if key != "extra" and key in Config.__dataclass_fields__:
            return getattr(self, key)
        return self.extra.get(key, default)


def load_config(path: str = "config.json", env_file: Optional[str] = None) -> Config:
    """Load configuration from a JSON file with environment overrides.

    A missing, unreadable or malformed file is logged and the defaults are
    used. Values of the wrong type or out of range are reset to their
    defaults individually.

    Args:
        path: Path to config.json file
        env_file: Path to .env file (optional)

    Returns:
        Config: Loaded and validated configuration
    """
    data: Dict[str, Any] = {}
    env_config: Optional[EnvironmentConfig] = None

    try:
        env_config = load_environment_config(env_file)
    except EnvironmentConfigError as e:
        logger.warning("Environment configuration ignored: %s", e)

    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded_data = json.load(f)
            if loaded_data is None:
                logger.warning("Configuration file '%s' is empty, using defaults", path)
            elif not isinstance(loaded_data, dict):
                logger.error("Configuration file '%s' does not contain a JSON object, using defaults", path)
            else:
                data = loaded_data
                logger.info("Loaded configuration from '%s'", path)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse JSON configuration file '%s': %s. Using defaults.", path, e)
        except PermissionError:
            logger.error("Permission denied reading configuration file '%s'. Using defaults.", path)
        except OSError as e:
            logger.error("Error reading configuration file '%s': %s. Using defaults.", path, e)
    else:
        logger.info("Configuration file '%s' does not exist. Using defaults.", path)

    merged = {**DEFAULT_CONFIG, **data}
    if env_config:
        merged = _apply_environment_overrides(merged, env_config)
    merged = _sanitize_config_values(merged)

    known = [name for name in Config.__dataclass_fields__ if name != "extra"]
    extra = {k: v for k, v in merged.items() if k not in known}
    if extra:
        logger.info("Found extra configuration keys: %s", list(extra.keys()))

    return Config(**{k: merged[k] for k in known}, extra=extra)


def save_config(cfg: Config, path: str = "config.json") -> None:
    """Save configuration to a JSON file.

    Raises:
        ConfigError: If the file cannot be written
    """
    from ..core.exceptions import ConfigError

    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info("Configuration saved to '%s'", path)
    except OSError as e:
        logger.error("Error saving configuration file '%s': %s", path, e)
        raise ConfigError(f"Could not save configuration to '{path}': {e}") from e


def _apply_environment_overrides(config_dict: Dict[str, Any], env_config: EnvironmentConfig) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration."""
    overrides = {
        "detection_model": env_config.model_path,
        "detection_confidence_threshold": env_config.confidence_threshold,
        "detection_iou_threshold": env_config.iou_threshold,
        "row_tie_window_px": env_config.row_tie_window_px,
        "log_level": env_config.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            config_dict[key] = value

    if env_config.debug:
        config_dict["debug"] = True
        config_dict["log_level"] = "DEBUG"

    logger.debug("Applied environment variable overrides to configuration")
    return config_dict


def _sanitize_config_values(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Reset values of the wrong type or out of range to their defaults."""
    sanitized = config_dict.copy()

    for key, (min_val, max_val) in _NUMERIC_RANGES.items():
        value = sanitized.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Value %s=%r is not numeric, using default", key, value)
            sanitized[key] = DEFAULT_CONFIG[key]
        elif (min_val is not None and value < min_val) or (max_val is not None and value > max_val):
            logger.warning("Value %s=%r out of range [%s, %s], using default", key, value, min_val, max_val)
            sanitized[key] = DEFAULT_CONFIG[key]

    for key in _STRING_KEYS:
        value = sanitized.get(key)
        if not isinstance(value, str):
            logger.warning("Setting '%s' is not a string: %r. Using default.", key, value)
            sanitized[key] = DEFAULT_CONFIG[key]

    for key in _BOOL_KEYS:
        if not isinstance(sanitized.get(key), bool):
            logger.warning("Setting '%s' is not a boolean. Using default.", key)
            sanitized[key] = DEFAULT_CONFIG[key]

    try:
        sanitized["medicine_name_template"].format(index=1)
    except (KeyError, IndexError, ValueError, AttributeError, TypeError):
        logger.warning("Invalid medicine_name_template %r, using default", sanitized["medicine_name_template"])
        sanitized["medicine_name_template"] = DEFAULT_CONFIG["medicine_name_template"]

    sanitized["log_level"] = sanitized["log_level"].upper()
    return sanitized
