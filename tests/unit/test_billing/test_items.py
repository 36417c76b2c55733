"""Unit tests for bill item conversion."""
from decimal import Decimal

from medbill.billing.items import BillItemInput, rows_to_bill_items
from medbill.core.entities import Row


class TestRowsToBillItems:
    """Test suite for rows_to_bill_items."""

    def test_full_row(self):
        rows = [Row(medicine_name="Dolo 650", batch_and_expiry="D1 08/27", quantity="2",
                    hsn_code="30049099", amount="30.50")]

        item = rows_to_bill_items(rows)[0]

        assert item.medicine_name == "Dolo 650"
        assert item.quantity == "2"
        assert item.price_per_unit == "30.50"
        assert item.total == Decimal("61.00")
        assert item.hsn_code == "30049099"
        assert item.batch_no == "D1 08/27"
        assert item.expiry_date == ""
        assert item.ocr_confidence == 0.8

    def test_blank_row_defaults(self):
        items = rows_to_bill_items([Row(), Row(medicine_name="Medicine 2")],
                                   default_hsn_code="3004", ocr_confidence=0.5)

        assert items[0].medicine_name == "Item 1"
        assert items[0].quantity == "1"
        assert items[0].price_per_unit == "0"
        assert items[0].total == Decimal("0.00")
        assert items[0].hsn_code == "3004"
        assert items[0].batch_no == ""
        assert items[1].medicine_name == "Medicine 2"
        assert items[1].ocr_confidence == 0.5

    def test_non_numeric_amount_totals_zero(self):
        item = rows_to_bill_items([Row(medicine_name="X", quantity="2", amount="Amount")])[0]
        assert item.total == Decimal("0.00")

    def test_recalculate_and_to_dict(self):
        item = rows_to_bill_items([Row(medicine_name="X", quantity="1", amount="10")])[0]
        item.quantity = "3"
        item.recalculate()

        data = item.to_dict()

        assert data["total"] == "30.00"
        assert data["medicine_name"] == "X"

    def test_empty(self):
        assert rows_to_bill_items([]) == []

    def test_item_type(self):
        assert isinstance(rows_to_bill_items([Row(medicine_name="X")])[0], BillItemInput)
