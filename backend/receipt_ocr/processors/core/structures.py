"""
Receipt Processing Data Structures.

This module defines the data structures shared by the receipt extraction
pipeline: the decoded OCR blocks, the parsed purchase records, and the
per-image / per-request results built from them.
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional, Dict, Any, Tuple, Union
from enum import Enum


class BlockType(Enum):
    """Textract block types the extractor understands."""
    LINE = "LINE"
    TABLE = "TABLE"
    CELL = "CELL"
    WORD = "WORD"


class ParseMode(Enum):
    """Item extraction mode chosen for one image."""
    TABLE = "table"
    FREE_TEXT = "free_text"


class RejectionReason(Enum):
    """Why a free-text line did not produce an item."""
    NO_PRICE = "no_price"
    EMPTY_NAME = "empty_name"
    FOOTER = "footer"
    DISCOUNT = "discount"


@dataclass(frozen=True)
class LineBlock:
    """A recognised text line."""
    text: str
    block_id: str = ""
    top: Optional[float] = None


@dataclass(frozen=True)
class TableBlock:
    """Marks a detected table; its cells arrive as separate CellBlocks."""
    block_id: str = ""
    child_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CellBlock:
    """One table cell with its row/column position and resolved text."""
    row_index: int
    text: str
    column_index: int = 0
    block_id: str = ""


OCRBlock = Union[LineBlock, TableBlock, CellBlock]


@dataclass(frozen=True)
class ParsedLineItem:
    """One purchasable item reconstructed from a table row or a text line."""
    name: str
    unit_price: float
    total_price: float
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }


@dataclass(frozen=True)
class ReceiptMetadata:
    """Header and footer values printed on the receipt."""
    store_name: Optional[str] = None
    store_location: Optional[str] = None
    purchase_date: Optional[str] = None
    receipt_total: Optional[float] = None
    receipt_item_count: Optional[int] = None

    def merge(self, later: "ReceiptMetadata") -> "ReceiptMetadata":
        """Fill fields still missing here from a later image; found values are never replaced."""
        return ReceiptMetadata(
            store_name=self.store_name or later.store_name,
            store_location=self.store_location or later.store_location,
            purchase_date=self.purchase_date or later.purchase_date,
            receipt_total=self.receipt_total if self.receipt_total is not None else later.receipt_total,
            receipt_item_count=(
                self.receipt_item_count if self.receipt_item_count is not None
                else later.receipt_item_count
            ),
        )


@dataclass(frozen=True)
class ParseCounters:
    """Item and rejection statistics."""
    table_items: int = 0
    line_items: int = 0
    rejection_reasons: Dict[str, int] = field(default_factory=dict)

    @property
    def rejected_lines(self) -> int:
        return sum(self.rejection_reasons.values())

    def combine(self, other: "ParseCounters") -> "ParseCounters":
        reasons = dict(self.rejection_reasons)
        for reason, count in other.rejection_reasons.items():
            reasons[reason] = reasons.get(reason, 0) + count
        return ParseCounters(
            table_items=self.table_items + other.table_items,
            line_items=self.line_items + other.line_items,
            rejection_reasons=reasons,
        )


@dataclass(frozen=True)
class ImageParseResult:
    """Everything extracted from one receipt image."""
    mode: ParseMode
    items: Tuple[ParsedLineItem, ...] = ()
    metadata: ReceiptMetadata = field(default_factory=ReceiptMetadata)
    counters: ParseCounters = field(default_factory=ParseCounters)
    rejected_discounts: Tuple[float, ...] = ()


@dataclass(frozen=True)
class ExtractionAccumulator:
    """Running state of the fold over a request's images, in array order."""
    items: Tuple[ParsedLineItem, ...] = ()
    metadata: ReceiptMetadata = field(default_factory=ReceiptMetadata)
    counters: ParseCounters = field(default_factory=ParseCounters)
    rejected_discounts: Tuple[float, ...] = ()
    images_processed: int = 0

    def add(self, image: ImageParseResult) -> "ExtractionAccumulator":
        return replace(
            self,
            items=self.items + image.items,
            metadata=self.metadata.merge(image.metadata),
            counters=self.counters.combine(image.counters),
            rejected_discounts=self.rejected_discounts + image.rejected_discounts,
            images_processed=self.images_processed + 1,
        )


@dataclass(frozen=True)
class ReconciliationReport:
    """Computed totals compared with the values printed on the receipt."""
    extracted_receipt_total: Optional[float]
    extracted_receipt_item_count: Optional[int]
    computed_items_total_excl_discounts: float
    computed_items_count_excl_discounts: int
    total_delta: float
    total_mismatch: bool
    count_delta: Optional[int] = None
    count_mismatch: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extracted_receipt_total": self.extracted_receipt_total,
            "extracted_receipt_item_count": self.extracted_receipt_item_count,
            "computed_items_total_excl_discounts": self.computed_items_total_excl_discounts,
            "computed_items_count_excl_discounts": self.computed_items_count_excl_discounts,
            "total_delta": self.total_delta,
            "total_mismatch": self.total_mismatch,
            "count_delta": self.count_delta,
            "count_mismatch": self.count_mismatch,
        }


@dataclass(frozen=True)
class ReceiptExtractionResult:
    """Final result of one extraction request."""
    items: List[ParsedLineItem]
    store_name: str
    store_location: str
    purchase_date: Optional[str]
    purchase_date_iso: Optional[str]
    total_discounts: float
    reconciliation: ReconciliationReport
    confidence_score: int
    counters: ParseCounters

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the API response payload."""
        return {
            "success": True,
            "items": [item.to_dict() for item in self.items],
            "extracted_store_name": self.store_name,
            "extracted_store_location": self.store_location,
            "extracted_purchase_date": self.purchase_date,
            "purchase_date_iso": self.purchase_date_iso,
            "total_discounts": self.total_discounts,
            "reconciliation": self.reconciliation.to_dict(),
            "parseQuality": {
                "confidenceScore": self.confidence_score,
                "totalTableItems": self.counters.table_items,
                "totalLineItems": self.counters.line_items,
                "totalRejectedLines": self.counters.rejected_lines,
                "rejectionReasons": dict(self.counters.rejection_reasons),
            },
        }
