"""Environment variable configuration.

Values come from an optional ``.env`` file first and the process environment
second. Every numeric value is range-checked; a bad value raises
:class:`EnvironmentConfigError` so the caller can fall back to the file
configuration.
"""
import os
import logging
from typing import Optional, Dict, Union
from pathlib import Path
from dataclasses import dataclass

from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUTHY = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class EnvironmentConfig:
    """Immutable environment configuration object.

    ``None`` means the variable was not set and the file value stands.
    """

    model_path: Optional[str]
    confidence_threshold: Optional[float]
    iou_threshold: Optional[float]
    row_tie_window_px: Optional[float]
    log_level: Optional[str]
    debug: bool


class EnvironmentConfigError(ConfigError):
    """Raised when an environment variable holds an invalid value."""
    pass


class EnvironmentValidator:
    """Validates environment variable values."""

    @classmethod
    def validate_numeric_range(cls, value: Union[str, int, float],
                              min_val: Optional[Union[int, float]] = None,
                              max_val: Optional[Union[int, float]] = None,
                              value_type: type = int) -> Union[int, float]:
        """Validate numeric value within specified range.

        Args:
            value: The value to validate
            min_val: Minimum allowed value
            max_val: Maximum allowed value
            value_type: Expected type (int or float)

        Returns:
            The validated numeric value

        Raises:
            EnvironmentConfigError: If validation fails
        """
        try:
            numeric_value = value_type(value)
        except (ValueError, TypeError):
            raise EnvironmentConfigError(f"Invalid {value_type.__name__} value: {value}")

        if min_val is not None and numeric_value < min_val:
            raise EnvironmentConfigError(f"Value {numeric_value} below minimum {min_val}")

        if max_val is not None and numeric_value > max_val:
            raise EnvironmentConfigError(f"Value {numeric_value} above maximum {max_val}")

        return numeric_value

    @classmethod
    def validate_log_level(cls, level: str) -> str:
        normalized = level.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise EnvironmentConfigError(f"Invalid log level: {level}")
        return normalized


def load_env_file(env_path: Optional[str] = None) -> Dict[str, str]:
    """Load environment variables from a ``.env`` file.

    Args:
        env_path: Path to .env file. Defaults to .env in current directory.

    Returns:
        dict: Loaded environment variables
    """
    if env_path is None:
        env_path = ".env"

    env_vars: Dict[str, str] = {}
    env_file_path = Path(env_path)

    if not env_file_path.exists():
        logger.debug("Environment file %s not found, using system environment only", env_path)
        return env_vars

    try:
        with open(env_file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()

                if not line or line.startswith('#'):
                    continue

                if '=' in line:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    value = value.strip()

                    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                        value = value[1:-1]

                    env_vars[key] = value
                else:
                    logger.warning("Invalid line format in %s:%d: %s", env_path, line_num, line)

        logger.info("Loaded %d variables from %s", len(env_vars), env_path)

    except OSError as e:
        logger.error("Error reading environment file %s: %s", env_path, e)

    return env_vars


def get_env_var(key: str, default: Optional[str] = None,
                required: bool = False, env_vars: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Get an environment variable, preferring values loaded from ``.env``.

    Raises:
        EnvironmentConfigError: If required variable is missing
    """
    if env_vars and key in env_vars:
        value = env_vars[key]
    else:
        value = os.getenv(key, default)

    if required and (value is None or value.strip() == ""):
        raise EnvironmentConfigError(f"Required environment variable '{key}' is not set")

    return value


def load_environment_config(env_file_path: Optional[str] = None) -> EnvironmentConfig:
    """Load and validate the ``MEDBILL_*`` environment variables.

    Raises:
        EnvironmentConfigError: If any value is invalid
    """
    env_vars = load_env_file(env_file_path)
    validator = EnvironmentValidator()

    def _float(key: str, min_val: float, max_val: Optional[float]) -> Optional[float]:
        raw = get_env_var(key, env_vars=env_vars)
        if raw is None or not raw.strip():
            return None
        return validator.validate_numeric_range(raw, min_val, max_val, float)

    model_path = get_env_var("MEDBILL_MODEL_PATH", env_vars=env_vars) or None
    confidence = _float("MEDBILL_CONFIDENCE_THRESHOLD", 0.0, 1.0)
    iou = _float("MEDBILL_IOU_THRESHOLD", 0.0, 1.0)
    tie_window = _float("MEDBILL_ROW_TIE_WINDOW_PX", 0.0, None)

    log_level = get_env_var("MEDBILL_LOG_LEVEL", env_vars=env_vars)
    if log_level:
        log_level = validator.validate_log_level(log_level)
    else:
        log_level = None

    debug = (get_env_var("MEDBILL_DEBUG", "false", env_vars=env_vars) or "").lower() in TRUTHY

    config = EnvironmentConfig(
        model_path=model_path,
        confidence_threshold=confidence,
        iou_threshold=iou,
        row_tie_window_px=tie_window,
        log_level=log_level,
        debug=debug,
    )
    logger.debug("Environment configuration loaded: %s", config)
    return config


__all__ = [
    "EnvironmentConfig",
    "EnvironmentConfigError",
    "EnvironmentValidator",
    "load_environment_config",
    "load_env_file",
    "get_env_var",
]
