"""Unit tests for label normalization and classification."""
import pytest

from medbill.core.entities import FieldSlot, MetadataField
from medbill.extraction.vocabulary import (
    classify, is_anchor, is_line_item_label, is_metadata_label, matches_metadata_field, normalize,
)


class TestNormalize:
    """Test suite for normalize."""

    @pytest.mark.parametrize("label,expected", [
        ("  Med   Name ", "med name"),
        ("HSN\tCode", "hsn code"),
        ("Batch\n Exp", "batch exp"),
        ("", ""),
        (None, ""),
        ("   ", ""),
    ])
    def test_normalize(self, label, expected):
        assert normalize(label) == expected

    @pytest.mark.parametrize("label", ["  A  b ", "MED\t\tNAME", "x", "", "  Ünïcode  Label "])
    def test_idempotent(self, label):
        assert normalize(normalize(label)) == normalize(label)


class TestIsAnchor:
    """Test suite for anchor detection."""

    @pytest.mark.parametrize("label", [
        "Med Name", "medname", "Medicine Name", "MEDICINE", "med", "Item", "product",
        "Medication", "generic medicine", "med name (printed)",
    ])
    def test_anchor_labels(self, label):
        assert is_anchor(label)

    @pytest.mark.parametrize("label", ["Quantity", "Amount", "Customer Name", "", None, "items sold"])
    def test_non_anchor_labels(self, label):
        assert not is_anchor(label)


class TestClassify:
    """Test suite for field classification."""

    @pytest.mark.parametrize("label,slot", [
        ("Med Name", FieldSlot.MEDICINE_NAME),
        ("Batch Exp", FieldSlot.BATCH_AND_EXPIRY),
        ("Quantity", FieldSlot.QUANTITY),
        ("HSN Code", FieldSlot.HSN_CODE),
        ("Amount", FieldSlot.AMOUNT),
    ])
    def test_exact_names(self, label, slot):
        assert classify(label) == slot

    @pytest.mark.parametrize("label,slot", [
        ("  med   name ", FieldSlot.MEDICINE_NAME),
        ("Medicine Name", FieldSlot.MEDICINE_NAME),
        ("batchexp", FieldSlot.BATCH_AND_EXPIRY),
        ("QTY", FieldSlot.QUANTITY),
        ("Total Quantity", FieldSlot.QUANTITY),
        ("hsncode", FieldSlot.HSN_CODE),
        ("Unit Price", FieldSlot.AMOUNT),
        ("Net Amount", FieldSlot.AMOUNT),
    ])
    def test_partial_names(self, label, slot):
        assert classify(label) == slot

    @pytest.mark.parametrize("label", ["qty sold", "Customer Name", "Doctor", "", None, "Medicine"])
    def test_unclassified(self, label):
        assert classify(label) is None


class TestLineItemAndMetadata:
    """Test suite for line-item and metadata pattern matching."""

    @pytest.mark.parametrize("label", ["Med Name", "batch exp", "QUANTITY", "HSN Code", "Net Amount"])
    def test_line_item_labels(self, label):
        assert is_line_item_label(label)

    @pytest.mark.parametrize("label", ["Customer Name", "Phone", "Medicine", "qty", ""])
    def test_not_line_item_labels(self, label):
        assert not is_line_item_label(label)

    @pytest.mark.parametrize("label,field", [
        ("Customer Name", MetadataField.CUSTOMER_NAME),
        ("Patient", MetadataField.CUSTOMER_NAME),
        ("Mobile Number", MetadataField.CUSTOMER_PHONE),
        ("Address", MetadataField.CUSTOMER_ADDRESS),
        ("Invoice No", MetadataField.BILL_NUMBER),
        ("Bill Date", MetadataField.BILL_DATE),
        ("Prescribed By", MetadataField.DOCTOR_NAME),
    ])
    def test_metadata_field_patterns(self, label, field):
        assert matches_metadata_field(label, field)
        assert is_metadata_label(label)

    @pytest.mark.parametrize("label", ["Quantity", "Medicine", "Item", ""])
    def test_not_metadata(self, label):
        assert not is_metadata_label(label)
