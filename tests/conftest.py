"""Pytest configuration and shared fixtures for medbill.

Provides detection fixtures shaped like real detector output for a small
pharmacy bill, configuration fixtures and test markers.
"""
import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import Mock

import numpy as np
import pytest

from medbill.config.settings import Config
from medbill.core.entities import BoundingBox, Detection
from medbill.core.logging_config import logging_manager

PROJECT_ROOT = Path(__file__).parent.parent

# Disable some verbose loggers during testing
logging.getLogger('ultralytics').setLevel(logging.WARNING)


def make_detection(label: str, y: float, *, x: float = 0.0, height: float = 0.0,
                   confidence: float = 0.9, value=None) -> Detection:
    """Build a detection whose vertical center is ``y + height / 2``."""
    return Detection(
        class_label=label,
        bbox=BoundingBox(x=x, y=y, width=40.0, height=height),
        confidence=confidence,
        value=value,
    )


@pytest.fixture(scope="session")
def project_root():
    """Provide project root directory path."""
    return PROJECT_ROOT


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def detection_factory():
    """Provide the detection builder used across extraction tests."""
    return make_detection


@pytest.fixture
def default_config():
    """Provide a configuration object with default values."""
    return Config()


@pytest.fixture
def real_config(temp_dir, clean_env):
    """Provide a configuration loaded from a JSON file in a temp directory."""
    config_data = {
        "row_tie_window_px": 5.0,
        "detection_confidence_threshold": 0.5,
        "detection_iou_threshold": 0.45,
        "log_dir": str(temp_dir / "logs"),
        "debug": True,
    }

    config_file = temp_dir / "config.json"
    with open(config_file, 'w') as f:
        json.dump(config_data, f, indent=2)

    from medbill.config.settings import load_config
    return load_config(str(config_file), env_file=str(temp_dir / ".env"))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove MEDBILL_* variables so tests see only what they set."""
    for key in list(os.environ):
        if key.startswith("MEDBILL_"):
            monkeypatch.delenv(key, raising=False)
    yield monkeypatch


@pytest.fixture
def sample_predictions() -> List[Dict[str, Any]]:
    """Detector records for a two-line bill with customer details."""
    return [
        {"class": "Customer Name", "x": 40, "y": 20, "width": 200, "height": 20, "confidence": 0.95},
        {"class": "Bill No", "x": 400, "y": 20, "width": 120, "height": 20, "confidence": 0.91},
        {"class": "Date", "x": 400, "y": 50, "width": 120, "height": 20, "confidence": 0.88},
        {"class": "Med Name", "x": 40, "y": 200, "width": 180, "height": 20,
         "confidence": 0.93, "value": "Paracetamol 500"},
        {"class": "Batch Exp", "x": 240, "y": 201, "width": 90, "height": 20,
         "confidence": 0.87, "value": "B12 09/26"},
        {"class": "Quantity", "x": 350, "y": 199, "width": 30, "height": 20,
         "confidence": 0.9, "value": "2"},
        {"class": "HSN Code", "x": 400, "y": 200, "width": 60, "height": 20, "confidence": 0.8},
        {"class": "Amount", "x": 480, "y": 202, "width": 60, "height": 20,
         "confidence": 0.92, "value": "35.50"},
        {"class": "Med Name", "x": 40, "y": 260, "width": 180, "height": 20, "confidence": 0.9},
        {"class": "Quantity", "x": 350, "y": 261, "width": 30, "height": 20, "confidence": 0.85},
        {"class": "Amount", "x": 480, "y": 259, "width": 60, "height": 20,
         "confidence": 0.9, "value": "120"},
    ]


@pytest.fixture
def sample_image():
    """Provide a blank bill-sized image."""
    return np.full((800, 600, 3), 255, dtype=np.uint8)


@pytest.fixture
def mock_backend():
    """Provide a loaded backend mock that returns no detections."""
    from medbill.backends.base_backend import BaseBackend

    backend = Mock(spec=BaseBackend)
    backend.is_model_loaded.return_value = True
    backend.predict.return_value = []
    return backend


@pytest.fixture
def reset_logging():
    """Start from unconfigured logging and undo handlers installed by configure_logging."""
    logging_manager.shutdown()
    yield logging_manager
    logging_manager.shutdown()


# Test markers and utilities
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "model: mark test as requiring a real YOLO model")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and skip conditions."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if item.get_closest_marker("model") and not os.getenv("MEDBILL_TEST_MODEL"):
            item.add_marker(pytest.mark.skip(reason="Model tests disabled"))
