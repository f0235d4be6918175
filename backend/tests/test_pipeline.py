"""Test the multi-image extraction pipeline on decoded Textract blocks."""
import json
from pathlib import Path

import pytest

from block_builders import table_receipt, text_receipt
from receipt_ocr.processors.core.structures import ParseMode
from receipt_ocr.processors.validation.pipeline import (
    fold_image_results, parse_image_blocks, process_receipt_pipeline,
)
from receipt_ocr.services.ocr.ocr_normalizer import normalize_textract_blocks


def _decode(*images):
    return [normalize_textract_blocks(blocks) for blocks in images]


def test_table_mode_across_two_images():
    image = lambda: table_receipt(
        rows=[["Milk", "1.20"], ["Bread", "0.95"]],
        lines=["Milk 1.20", "Bread 0.95"],
    )
    result = process_receipt_pipeline(_decode(image(), image()))
    payload = result.to_dict()

    assert len(payload["items"]) == 4
    assert {item["name"] for item in payload["items"]} == {"Milk", "Bread"}
    assert payload["reconciliation"]["computed_items_total_excl_discounts"] == 4.30
    assert payload["parseQuality"]["totalTableItems"] == 4
    assert payload["parseQuality"]["totalLineItems"] == 0
    assert payload["parseQuality"]["totalRejectedLines"] == 0
    assert payload["parseQuality"]["confidenceScore"] == 80


def test_free_text_mode_with_discount_line():
    blocks = text_receipt(["Bananas 1.10", "Clubcard Price -0.20", "Total GBP 0.90"])
    result = process_receipt_pipeline(_decode(blocks))
    payload = result.to_dict()

    assert payload["items"] == [
        {"name": "Bananas", "quantity": 1, "unit_price": 1.10, "total_price": 1.10}
    ]
    reconciliation = payload["reconciliation"]
    assert reconciliation["extracted_receipt_total"] == pytest.approx(0.90)
    assert reconciliation["computed_items_total_excl_discounts"] == 1.10
    assert reconciliation["total_delta"] == 0.20
    assert reconciliation["total_mismatch"] is False
    assert payload["total_discounts"] == 0.20
    assert payload["parseQuality"]["totalLineItems"] == 1
    assert payload["parseQuality"]["totalRejectedLines"] == 2
    assert payload["parseQuality"]["rejectionReasons"] == {"discount": 1, "footer": 1}


def test_fallback_total_reported_when_nothing_printed():
    blocks = text_receipt(["ALDI", "Carrots 0.45", "Apples 1.99"])
    result = process_receipt_pipeline(_decode(blocks), total_amount=25.00)
    assert result.reconciliation.extracted_receipt_total == 25.00
    assert result.reconciliation.total_mismatch is True


def test_table_discount_rows_removed_by_final_filter():
    blocks = table_receipt(rows=[
        ["Cheddar", "3.50"],
        ["Clubcard Price", "-0.50"],
        ["Nectar offer", "0.25"],
    ])
    result = process_receipt_pipeline(_decode(blocks))

    assert [item.name for item in result.items] == ["Cheddar"]
    assert result.counters.table_items == 3
    assert result.total_discounts == 0.75
    assert result.reconciliation.computed_items_count_excl_discounts == 1


def test_table_mode_ignores_line_items():
    blocks = table_receipt(rows=[["Milk", "1.20"]], lines=["Jam 2.00", "Butter 1.80"])
    image = parse_image_blocks(normalize_textract_blocks(blocks))
    assert image.mode is ParseMode.TABLE
    assert [item.name for item in image.items] == ["Milk"]
    assert image.counters.line_items == 0


def test_metadata_first_image_wins():
    first = text_receipt([
        "TESCO",
        "Kensington High St",
        "Bananas 1.10",
        "TOTAL 1.10",
    ])
    second = text_receipt([
        "SAINSBURYS",
        "Holloway Road",
        "14/03/25",
        "Milk 1.20",
        "TOTAL 9.99",
        "2 items",
    ])
    result = process_receipt_pipeline(_decode(first, second), store_name="Fallback Store")

    assert result.store_name == "TESCO"
    assert result.store_location == "Kensington High St"
    # Not found on the first image, so the second supplies it
    assert result.purchase_date == "14/03/25"
    assert result.purchase_date_iso == "2025-03-14"
    assert result.reconciliation.extracted_receipt_total == pytest.approx(1.10)
    assert result.reconciliation.extracted_receipt_item_count == 2
    assert [item.name for item in result.items] == ["Bananas", "Milk"]


def test_fold_preserves_array_order():
    images = [
        parse_image_blocks(normalize_textract_blocks(text_receipt(["A Store", "Eggs 2.10"]))),
        parse_image_blocks(normalize_textract_blocks(text_receipt(["B Store", "Ham 3.00"]))),
    ]
    forward = fold_image_results(images)
    backward = fold_image_results(reversed(images))
    assert forward.metadata.store_name == "A Store"
    assert backward.metadata.store_name == "B Store"
    assert forward.images_processed == 2


def test_store_name_fallback_when_no_image_has_one():
    blocks = text_receipt(["0123 456", "01/02/24"])
    result = process_receipt_pipeline(_decode(blocks), store_name="Co-op")
    assert result.store_name == "Co-op"

    result = process_receipt_pipeline(_decode(blocks), store_name="Unknown Store")
    assert result.store_name == ""


def test_no_images_gives_empty_result():
    result = process_receipt_pipeline([])
    payload = result.to_dict()
    assert payload["success"] is True
    assert payload["items"] == []
    assert payload["reconciliation"]["computed_items_total_excl_discounts"] == 0.0
    assert payload["parseQuality"]["confidenceScore"] == 0
    assert payload["extracted_store_name"] == ""
    assert payload["extracted_purchase_date"] is None


def test_saved_textract_response():
    fixture = Path(__file__).parent / "fixtures" / "tesco_analyze_document.json"
    raw_blocks = json.loads(fixture.read_text(encoding="utf-8"))["Blocks"]
    result = process_receipt_pipeline(_decode(raw_blocks), store_name="Tesco Express")
    payload = result.to_dict()

    assert [item["name"] for item in payload["items"]] == ["Semi Skimmed Milk", "Hovis Bread"]
    assert payload["extracted_store_name"] == "TESCO"
    assert payload["purchase_date_iso"] == "2025-03-14"
    assert payload["total_discounts"] == 0.20
    reconciliation = payload["reconciliation"]
    assert reconciliation["extracted_receipt_total"] == 2.20
    assert reconciliation["computed_items_total_excl_discounts"] == 2.40
    assert reconciliation["total_delta"] == 0.20
    assert reconciliation["extracted_receipt_item_count"] == 3
    assert reconciliation["count_delta"] == -1
    assert reconciliation["count_mismatch"] is False
    assert payload["parseQuality"]["totalTableItems"] == 3


def test_payment_lines_after_total_are_not_items():
    blocks = text_receipt(["Bananas 1.10", "TOTAL 1.10", "CASH 5.00", "Balance Due 3.90"])
    payload = process_receipt_pipeline(_decode(blocks)).to_dict()

    assert [item["name"] for item in payload["items"]] == ["Bananas"]
    reconciliation = payload["reconciliation"]
    assert reconciliation["extracted_receipt_total"] == 1.10
    assert reconciliation["computed_items_total_excl_discounts"] == 1.10
    assert reconciliation["total_delta"] == 0.0
    assert reconciliation["total_mismatch"] is False
    assert payload["parseQuality"]["rejectionReasons"] == {"footer": 3}
