"""
Item Extractor: Build purchase records from one image's OCR blocks.

Two modes, chosen per image by the pipeline:
- Table mode: Textract detected a table; every table row with a trailing
  price becomes an item. No discount filtering at this stage.
- Free-text mode: no table; every recognised line above the footer is
  matched against "<name> <price>" and either becomes an item or is rejected
  for exactly one reason. Footer lines are rejected as a whole.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging
import re

from ..core.structures import CellBlock, ParsedLineItem, RejectionReason
from ..text.price_parser import parse_price_value
from ...utils.float_precision import round_money
from .discount_classifier import is_discount_candidate

logger = logging.getLogger(__name__)

TABLE_ROW_PRICE_PATTERN = re.compile(r'(-?\d+[.,]\d{2})\s*$')
FREE_TEXT_LINE_PATTERN = re.compile(r'(.*)\s+(-?\d+[.,]\d{2})$')
NUMERIC_ONLY_PATTERN = re.compile(r'^[\d\s.,\-]+$')


@dataclass
class TableExtraction:
    """Items found in table rows."""
    items: List[ParsedLineItem] = field(default_factory=list)
    rows_seen: int = 0


@dataclass
class FreeTextExtraction:
    """Items and rejections from line-by-line parsing."""
    items: List[ParsedLineItem] = field(default_factory=list)
    rejection_reasons: Dict[str, int] = field(default_factory=dict)
    rejected_discounts: List[float] = field(default_factory=list)
    lines_processed: int = 0

    def reject(self, reason: RejectionReason, text: str):
        self.rejection_reasons[reason.value] = self.rejection_reasons.get(reason.value, 0) + 1
        logger.debug(f"Rejected line ({reason.value}): '{text}'")

    @property
    def rejected_lines(self) -> int:
        return sum(self.rejection_reasons.values())


def _is_valid_name(name: str) -> bool:
    return bool(name) and not NUMERIC_ONLY_PATTERN.match(name)


def _make_item(name: str, price_text: str) -> ParsedLineItem:
    price = round_money(parse_price_value(price_text))
    return ParsedLineItem(name=name, quantity=1, unit_price=price, total_price=price)


def group_cells_by_row(cells: List[CellBlock]) -> List[Tuple[int, List[CellBlock]]]:
    """
    Group table cells into rows by their row index.

    Rows come back ordered by row index and cells by column index, whatever
    order the OCR backend returned them in.
    """
    rows: Dict[int, List[CellBlock]] = defaultdict(list)
    for cell in cells:
        rows[cell.row_index].append(cell)
    return [
        (row_index, sorted(rows[row_index], key=lambda c: c.column_index))
        for row_index in sorted(rows)
    ]


def extract_table_items(cells: List[CellBlock]) -> TableExtraction:
    """
    Extract items from table cells.

    Each row's cell texts are joined with spaces; a trailing price is split
    off and the text before it is the item name. Rows without a price or
    without a usable name are skipped.
    """
    result = TableExtraction()

    for row_index, row_cells in group_cells_by_row(cells):
        result.rows_seen += 1
        row_text = " ".join(c.text.strip() for c in row_cells if c.text and c.text.strip())

        match = TABLE_ROW_PRICE_PATTERN.search(row_text)
        if not match:
            logger.debug(f"Table row {row_index} has no trailing price: '{row_text}'")
            continue

        name = row_text[:match.start()].strip()
        if not _is_valid_name(name):
            logger.debug(f"Table row {row_index} has no item name: '{row_text}'")
            continue

        item = _make_item(name, match.group(1))
        result.items.append(item)
        logger.debug(f"Table row {row_index}: {item.name} = {item.total_price:.2f}")

    logger.info(f"Extracted {len(result.items)} items from {result.rows_seen} table rows")
    return result


def extract_free_text_items(
    lines: List[str],
    footer_start_index: Optional[int] = None
) -> FreeTextExtraction:
    """
    Extract items from recognised text lines.

    Every line either yields an item or is rejected for exactly one reason,
    checked in this order: at or below the footer boundary, no trailing
    price, empty or numeric name, discount line.

    Args:
        lines: Recognised text lines of one image, in reading order
        footer_start_index: Index of the first footer line; None means the
            image has no footer
    """
    result = FreeTextExtraction()
    body_end = len(lines) if footer_start_index is None else footer_start_index

    for index, raw_text in enumerate(lines):
        result.lines_processed += 1
        text = (raw_text or "").strip()

        if index >= body_end:
            result.reject(RejectionReason.FOOTER, text)
            continue

        match = FREE_TEXT_LINE_PATTERN.match(text)
        if not match:
            result.reject(RejectionReason.NO_PRICE, text)
            continue

        name = match.group(1).strip()
        if not _is_valid_name(name):
            result.reject(RejectionReason.EMPTY_NAME, text)
            continue

        price = round_money(parse_price_value(match.group(2)))
        if is_discount_candidate(name, price):
            result.reject(RejectionReason.DISCOUNT, text)
            result.rejected_discounts.append(abs(price))
            continue

        result.items.append(ParsedLineItem(name=name, quantity=1, unit_price=price, total_price=price))

    logger.info(
        f"Free-text parsing: {len(result.items)} items, "
        f"{result.rejected_lines} rejected of {result.lines_processed} lines"
    )
    return result
