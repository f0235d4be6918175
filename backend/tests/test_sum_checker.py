"""Test reconciliation against printed totals and item counts."""
from receipt_ocr.processors.core.structures import ParsedLineItem
from receipt_ocr.processors.validation.sum_checker import (
    check_receipt_sums, compute_confidence_score,
)


def _items(*prices):
    return [ParsedLineItem(name=f"Item {i}", unit_price=p, total_price=p) for i, p in enumerate(prices)]


def test_total_delta_above_threshold_is_a_mismatch():
    report = check_receipt_sums(_items(20.00, 22.30), printed_total=42.90, printed_item_count=None)
    assert report.computed_items_total_excl_discounts == 42.30
    assert report.total_delta == -0.60
    assert report.total_mismatch is True


def test_total_delta_of_exactly_half_is_not_a_mismatch():
    report = check_receipt_sums(_items(20.00, 22.30), printed_total=42.80, printed_item_count=None)
    assert report.total_delta == -0.50
    assert report.total_mismatch is False

    report = check_receipt_sums(_items(20.00, 22.30), printed_total=41.80, printed_item_count=None)
    assert report.total_delta == 0.50
    assert report.total_mismatch is False


def test_fallback_total_used_when_nothing_printed():
    report = check_receipt_sums(_items(10.00, 14.50), printed_total=None,
                                printed_item_count=None, fallback_total=25.00)
    assert report.extracted_receipt_total == 25.00
    assert report.total_delta == -0.50
    assert report.total_mismatch is False


def test_printed_total_wins_over_fallback():
    report = check_receipt_sums(_items(5.00), printed_total=5.00,
                                printed_item_count=None, fallback_total=99.00)
    assert report.extracted_receipt_total == 5.00
    assert report.total_delta == 0.0


def test_no_reference_total():
    report = check_receipt_sums(_items(5.00), printed_total=None, printed_item_count=None)
    assert report.extracted_receipt_total is None
    assert report.total_delta == 0.0
    assert report.total_mismatch is False

    # A zero fallback means the caller did not know the total
    report = check_receipt_sums(_items(5.00), printed_total=None,
                                printed_item_count=None, fallback_total=0)
    assert report.extracted_receipt_total is None


def test_count_delta_only_with_printed_count():
    report = check_receipt_sums(_items(1.00, 2.00), printed_total=None, printed_item_count=None)
    assert report.count_delta is None
    assert report.count_mismatch is False

    report = check_receipt_sums(_items(1.00, 2.00), printed_total=None, printed_item_count=4)
    assert report.count_delta == -2
    assert report.count_mismatch is False

    report = check_receipt_sums(_items(1.00, 2.00), printed_total=None, printed_item_count=5)
    assert report.count_delta == -3
    assert report.count_mismatch is True


def test_confidence_score():
    assert compute_confidence_score(_items(1.00)) == 80
    assert compute_confidence_score([]) == 0
