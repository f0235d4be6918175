"""
Processors Core: Shared data structures for the extraction pipeline.
"""
from .structures import (
    BlockType, ParseMode, RejectionReason,
    LineBlock, TableBlock, CellBlock, OCRBlock,
    ParsedLineItem, ReceiptMetadata, ParseCounters,
    ImageParseResult, ExtractionAccumulator,
    ReconciliationReport, ReceiptExtractionResult,
)

__all__ = [
    "BlockType", "ParseMode", "RejectionReason",
    "LineBlock", "TableBlock", "CellBlock", "OCRBlock",
    "ParsedLineItem", "ReceiptMetadata", "ParseCounters",
    "ImageParseResult", "ExtractionAccumulator",
    "ReconciliationReport", "ReceiptExtractionResult",
]
