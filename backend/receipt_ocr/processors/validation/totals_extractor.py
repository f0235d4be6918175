"""
Totals Extractor: Printed receipt total and printed item count.

Both are searched for in the footer window only.
"""
from typing import List, Optional
import logging
import re

from ..text.price_parser import parse_price_value

logger = logging.getLogger(__name__)

# "TOTAL: GBP 12.34", "Total £12.34", "TOTAL 12,34"
TOTAL_PATTERN = re.compile(r'(total)\s*:?\s*(gbp|£)?\s*(\d+[.,]\d{2})', re.IGNORECASE)
# Looser: "TOTAL TO PAY 12.34", "Total due (card) 12.34"
LOOSE_TOTAL_PATTERN = re.compile(r'\btotal\b.*\b(\d+[.,]\d{2})\b', re.IGNORECASE)
ITEM_COUNT_PATTERN = re.compile(r'\b(\d+)\s+items?\b', re.IGNORECASE)


def find_receipt_total(footer_lines: List[str]) -> Optional[float]:
    """
    Find the total printed on the receipt.

    Footer lines are scanned from the end backward: receipts repeat "total"
    in subtotal and intermediate lines, and the final total is printed last.

    Returns:
        Parsed total, or None if no line matches
    """
    for text in reversed(footer_lines):
        text = text or ""
        match = TOTAL_PATTERN.search(text)
        if match:
            total = parse_price_value(match.group(3))
            logger.info(f"Found printed TOTAL: {total:.2f} in '{text}'")
            return total
        match = LOOSE_TOTAL_PATTERN.search(text)
        if match:
            total = parse_price_value(match.group(1))
            logger.info(f"Found printed TOTAL (loose match): {total:.2f} in '{text}'")
            return total
    return None


def find_receipt_item_count(footer_lines: List[str]) -> Optional[int]:
    """Find the printed item count ("12 items"), scanning the footer forward."""
    for text in footer_lines:
        match = ITEM_COUNT_PATTERN.search(text or "")
        if match:
            count = int(match.group(1))
            logger.info(f"Found printed item count: {count}")
            return count
    return None
