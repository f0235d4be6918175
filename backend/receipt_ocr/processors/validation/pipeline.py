"""
Receipt Extraction Pipeline.

Per image:
1. Split recognised lines into header/footer search windows
2. Extract store name, location, purchase date, printed total and item count
3. Extract items: table rows if a table was detected, otherwise free-text lines

Per request:
4. Fold per-image results in array order (first found metadata wins)
5. Drop discount entries, reconcile against the printed total and count
"""
from functools import reduce
from typing import Iterable, List, Optional
import logging

from ..core.structures import (
    CellBlock, ExtractionAccumulator, ImageParseResult, LineBlock, OCRBlock,
    ParseCounters, ParseMode, ReceiptExtractionResult, ReceiptMetadata, TableBlock,
)
from ...utils.float_precision import sum_money
from .discount_classifier import is_discount_only
from .header_extractor import (
    extract_purchase_date, extract_store_location, extract_store_name,
    normalize_purchase_date, resolve_store_name,
)
from .item_extractor import extract_free_text_items, extract_table_items
from .receipt_partitioner import split_sections
from .sum_checker import check_receipt_sums, compute_confidence_score
from .totals_extractor import find_receipt_item_count, find_receipt_total

logger = logging.getLogger(__name__)


def _partition_blocks(blocks: List[OCRBlock]):
    lines: List[str] = []
    cells: List[CellBlock] = []
    has_table = False
    for block in blocks:
        if isinstance(block, LineBlock):
            if block.text:
                lines.append(block.text)
        elif isinstance(block, CellBlock):
            cells.append(block)
        elif isinstance(block, TableBlock):
            has_table = True
    return lines, cells, has_table


def parse_image_blocks(blocks: List[OCRBlock]) -> ImageParseResult:
    """
    Run the single-image part of the pipeline.

    Args:
        blocks: Decoded OCR blocks of one image

    Returns:
        ImageParseResult with items, metadata and counters
    """
    lines, cells, has_table = _partition_blocks(blocks)
    sections = split_sections(lines)

    metadata = ReceiptMetadata(
        store_name=extract_store_name(sections.header_lines),
        store_location=extract_store_location(sections.header_lines),
        purchase_date=extract_purchase_date(lines),
        receipt_total=find_receipt_total(sections.footer_lines),
        receipt_item_count=find_receipt_item_count(sections.footer_lines),
    )

    if has_table:
        table = extract_table_items(cells)
        return ImageParseResult(
            mode=ParseMode.TABLE,
            items=tuple(table.items),
            metadata=metadata,
            counters=ParseCounters(table_items=len(table.items)),
        )

    free_text = extract_free_text_items(lines, footer_start_index=sections.footer_start_index)
    return ImageParseResult(
        mode=ParseMode.FREE_TEXT,
        items=tuple(free_text.items),
        metadata=metadata,
        counters=ParseCounters(
            line_items=len(free_text.items),
            rejection_reasons=dict(free_text.rejection_reasons),
        ),
        rejected_discounts=tuple(free_text.rejected_discounts),
    )


def fold_image_results(results: Iterable[ImageParseResult]) -> ExtractionAccumulator:
    """Combine per-image results in the order given."""
    return reduce(lambda acc, image: acc.add(image), results, ExtractionAccumulator())


def build_extraction_result(
    accumulator: ExtractionAccumulator,
    store_name: Optional[str] = None,
    total_amount: Optional[float] = None
) -> ReceiptExtractionResult:
    """
    Turn the folded request state into the final result.

    Discount entries are removed from the item list here; their amounts,
    together with discount lines already rejected during free-text parsing,
    make up total_discounts.
    """
    retained = [item for item in accumulator.items if not is_discount_only(item)]
    removed = [abs(item.total_price) for item in accumulator.items if is_discount_only(item)]
    if removed:
        logger.info(f"Removed {len(removed)} discount entries from item list")

    metadata = accumulator.metadata
    reconciliation = check_receipt_sums(
        retained,
        printed_total=metadata.receipt_total,
        printed_item_count=metadata.receipt_item_count,
        fallback_total=total_amount,
    )

    result = ReceiptExtractionResult(
        items=retained,
        store_name=resolve_store_name(metadata.store_name, store_name),
        store_location=metadata.store_location or "",
        purchase_date=metadata.purchase_date,
        purchase_date_iso=normalize_purchase_date(metadata.purchase_date),
        total_discounts=sum_money(list(accumulator.rejected_discounts) + removed),
        reconciliation=reconciliation,
        confidence_score=compute_confidence_score(retained),
        counters=accumulator.counters,
    )
    logger.info(
        f"Extraction complete: {len(retained)} items from {accumulator.images_processed} images, "
        f"total={reconciliation.computed_items_total_excl_discounts:.2f}, "
        f"confidence={result.confidence_score}"
    )
    return result


def process_receipt_pipeline(
    images: Iterable[List[OCRBlock]],
    store_name: Optional[str] = None,
    total_amount: Optional[float] = None
) -> ReceiptExtractionResult:
    """Run the full pipeline over already-decoded blocks, one list per image."""
    accumulator = fold_image_results(parse_image_blocks(blocks) for blocks in images)
    return build_extraction_result(accumulator, store_name=store_name, total_amount=total_amount)
