"""Unit tests for detector record conversion and response parsing."""
import pytest

from medbill.core.entities import BoundingBox, Detection
from medbill.core.exceptions import DetectionError
from medbill.extraction.conversion import (
    annotate_placeholder_values, convert_prediction, convert_predictions,
    parse_detection_response, placeholder_value,
)


class TestConvertPrediction:
    """Test suite for record conversion."""

    def test_full_record(self):
        det = convert_prediction({
            "class": "Amount", "x": 10, "y": 20.5, "width": 30, "height": 8,
            "confidence": 0.87, "value": "45.00", "class_id": 4,
        })

        assert det.class_label == "Amount"
        assert det.bbox == BoundingBox(x=10.0, y=20.5, width=30.0, height=8.0)
        assert det.confidence == pytest.approx(0.87)
        assert det.value == "45.00"
        assert det.class_id == 4

    def test_missing_fields_default(self):
        det = convert_prediction({"class": "Quantity", "x": 5, "y": 6})

        assert det.bbox.width == 0.0
        assert det.bbox.height == 0.0
        assert det.confidence == 0.0
        assert det.value is None
        assert det.class_id is None

    def test_bad_numbers_default_to_zero(self):
        det = convert_prediction({"class": "Quantity", "x": "left", "y": None, "confidence": "high"})

        assert det.bbox.x == 0.0
        assert det.bbox.y == 0.0
        assert det.confidence == 0.0

    def test_missing_class_is_malformed(self):
        det = convert_prediction({"x": 1, "y": 2})
        assert det.class_label == ""
        assert det.is_malformed

    def test_values_become_strings(self):
        assert convert_prediction({"class": "Quantity", "x": 0, "y": 0, "value": 3}).value == "3"
        assert convert_prediction({"class": "Quantity", "x": 0, "y": 0, "value": ""}).value == ""

    def test_detection_passes_through(self):
        det = Detection(class_label="Amount", bbox=BoundingBox(0, 0))
        assert convert_prediction(det) is det

    def test_convert_predictions_skips_non_objects(self):
        detections = convert_predictions([{"class": "Amount", "x": 0, "y": 0}, "noise", 42, None])
        assert [d.class_label for d in detections] == ["Amount"]

    @pytest.mark.parametrize("records", [None, []])
    def test_convert_predictions_empty(self, records):
        assert convert_predictions(records) == []


class TestPlaceholders:
    """Test suite for placeholder annotation."""

    @pytest.mark.parametrize("label,expected", [
        ("Med Name", "Medicine Item"),
        ("Medicine", "Medicine Item"),
        ("Quantity", "1"),
        ("QTY", "1"),
        ("Amount", "0"),
        ("Price", "0"),
        ("HSN Code", "3004"),
        ("Batch Exp", ""),
        ("Customer Name", "Customer Name"),
        (None, ""),
    ])
    def test_placeholder_value(self, label, expected):
        assert placeholder_value(label) == expected

    def test_annotate_fills_only_missing_values(self):
        records = [
            {"class": "Quantity", "x": 0, "y": 0},
            {"class": "Amount", "x": 0, "y": 0, "value": "99"},
            {"class": "HSN Code", "x": 0, "y": 0, "value": None},
        ]

        annotated = annotate_placeholder_values(records)

        assert [r["value"] for r in annotated] == ["1", "99", "3004"]
        assert "value" not in records[0]

    def test_annotate_passes_detections_through(self):
        det = Detection(class_label="Amount", bbox=BoundingBox(0, 0))
        assert annotate_placeholder_values([det]) == [det]


class TestParseDetectionResponse:
    """Test suite for detection response parsing."""

    def test_predictions_returned(self):
        payload = {
            "success": True,
            "predictions": [{"class": "Amount", "x": 1, "y": 2}, "junk"],
            "image": {"width": 600, "height": 800},
        }
        assert parse_detection_response(payload) == [{"class": "Amount", "x": 1, "y": 2}]

    def test_failure_raises_with_message(self):
        with pytest.raises(DetectionError, match="model offline"):
            parse_detection_response({"success": False, "error": "model offline"})

    def test_failure_without_message(self):
        with pytest.raises(DetectionError):
            parse_detection_response({"success": False})

    @pytest.mark.parametrize("payload", [{"success": True}, {"predictions": []}, {"predictions": None}])
    def test_no_predictions(self, payload):
        assert parse_detection_response(payload) == []

    def test_non_list_predictions_raise(self):
        with pytest.raises(DetectionError):
            parse_detection_response({"predictions": {"class": "Amount"}})

    @pytest.mark.parametrize("payload", [None, [], "ok"])
    def test_non_object_payload_raises(self, payload):
        with pytest.raises(DetectionError):
            parse_detection_response(payload)
