"""
Receipt Partitioner: Locate the header and footer windows of one image.

Regions:
1. Header: the first 5 lines (store name, address)
2. Footer: from the first totals/payment marker line to the end

The header window scopes the store name and location. In free-text mode
only lines above the footer boundary can become items.
"""
from dataclasses import dataclass
from typing import List
import logging
import re

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 5

# "total" must end a word, so "subtotal" matches but "totally" does not
FOOTER_MARKERS = [
    r"total\b", r"goods:", r"subtotal", r"vat", r"card number",
    r"authorisation", r"approved", r"contactless", r"merchant id",
    r"terminal id", r"eft no", r"change", r"debit", r"mastercard",
    r"visa", r"amount due",
]

FOOTER_MARKER_PATTERN = re.compile("|".join(FOOTER_MARKERS))


@dataclass(frozen=True)
class ReceiptSections:
    """Header/footer search windows for one image."""
    header_lines: List[str]
    footer_lines: List[str]
    footer_start_index: int


def is_footer_line(text: str) -> bool:
    """Check if a line carries a totals or payment marker."""
    return bool(FOOTER_MARKER_PATTERN.search((text or "").lower()))


def find_footer_start(lines: List[str]) -> int:
    """
    Find where the footer begins.

    Args:
        lines: Recognised text lines of one image, in reading order

    Returns:
        Index of the first footer marker line, or len(lines) if there is none
    """
    for i, text in enumerate(lines):
        if is_footer_line(text):
            logger.debug(f"Footer starts at line {i}: '{text}'")
            return i
    return len(lines)


def split_sections(lines: List[str]) -> ReceiptSections:
    """Build the header and footer windows for one image."""
    footer_start = find_footer_start(lines)
    sections = ReceiptSections(
        header_lines=lines[:min(HEADER_LINE_COUNT, len(lines))],
        footer_lines=lines[footer_start:],
        footer_start_index=footer_start,
    )
    logger.info(
        f"Receipt partitioned: "
        f"Header={len(sections.header_lines)} lines, "
        f"Footer={len(sections.footer_lines)} lines (starts at {footer_start})"
    )
    return sections
