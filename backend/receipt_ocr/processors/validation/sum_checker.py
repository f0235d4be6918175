"""
Sum Checker: Reconcile the extracted items against the printed receipt.

Validation rules:
1. sum(total_price) vs printed total: mismatch when |delta| > 0.50
2. item count vs printed item count: mismatch when |delta| > 2
3. If no total is printed, the caller's total is the reference
4. If no reference total exists at all, delta is 0 and no mismatch is raised
"""
from typing import List, Optional
import logging

from ..core.structures import ParsedLineItem, ReconciliationReport
from ...utils.float_precision import round_money, sum_money

logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = 0.50  # Currency units
COUNT_TOLERANCE = 2  # Items

CONFIDENCE_WITH_ITEMS = 80


def resolve_reference_total(
    printed_total: Optional[float],
    fallback_total: Optional[float]
) -> Optional[float]:
    """Printed total if found, else the caller's total when one was supplied (> 0)."""
    if printed_total is not None:
        return printed_total
    if fallback_total is not None and fallback_total > 0:
        logger.info(f"No printed total found, using caller total {fallback_total:.2f}")
        return round_money(fallback_total)
    return None


def check_receipt_sums(
    items: List[ParsedLineItem],
    printed_total: Optional[float],
    printed_item_count: Optional[int],
    fallback_total: Optional[float] = None
) -> ReconciliationReport:
    """
    Build the reconciliation report.

    Args:
        items: Retained items (discount entries already removed)
        printed_total: Total printed on the receipt, if found
        printed_item_count: Item count printed on the receipt, if found
        fallback_total: Caller-supplied total used when none is printed

    Returns:
        ReconciliationReport
    """
    computed_total = sum_money(item.total_price for item in items)
    computed_count = len(items)
    reference_total = resolve_reference_total(printed_total, fallback_total)

    if reference_total is not None:
        total_delta = round_money(computed_total - reference_total)
        total_mismatch = abs(total_delta) > TOTAL_TOLERANCE
    else:
        total_delta = 0.0
        total_mismatch = False

    count_delta = None
    count_mismatch = False
    if printed_item_count is not None:
        count_delta = computed_count - printed_item_count
        count_mismatch = abs(count_delta) > COUNT_TOLERANCE

    if total_mismatch:
        logger.warning(
            f"Total mismatch: computed={computed_total:.2f}, "
            f"receipt={reference_total:.2f}, delta={total_delta:.2f}"
        )
    else:
        logger.info(f"Sum check: computed={computed_total:.2f}, delta={total_delta:.2f}")
    if count_mismatch:
        logger.warning(f"Item count mismatch: computed={computed_count}, receipt={printed_item_count}")

    return ReconciliationReport(
        extracted_receipt_total=reference_total,
        extracted_receipt_item_count=printed_item_count,
        computed_items_total_excl_discounts=computed_total,
        computed_items_count_excl_discounts=computed_count,
        total_delta=total_delta,
        total_mismatch=total_mismatch,
        count_delta=count_delta,
        count_mismatch=count_mismatch,
    )


def compute_confidence_score(items: List[ParsedLineItem]) -> int:
    """Coarse quality gate: 80 when any item was retained, otherwise 0."""
    return CONFIDENCE_WITH_ITEMS if items else 0
