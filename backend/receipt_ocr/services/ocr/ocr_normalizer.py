"""
OCR Normalizer: Decode raw Textract blocks into typed OCR blocks.

Textract returns a flat list of dicts with a BlockType tag. The extractor
only needs three kinds:
- LINE  -> LineBlock(text)
- TABLE -> TableBlock
- CELL  -> CellBlock(row_index, column_index, text)

Cells from AnalyzeDocument carry no Text of their own; their text is the
space-joined text of the WORD blocks listed in their CHILD relationship.
Cells that already carry Text (saved fixtures, other backends) keep it.
Every other block type is dropped.
"""
from typing import Dict, Any, List, Optional
import logging

from ...processors.core.structures import BlockType, CellBlock, LineBlock, OCRBlock, TableBlock

logger = logging.getLogger(__name__)


def _child_ids(block: Dict[str, Any]) -> List[str]:
    ids: List[str] = []
    for relationship in block.get("Relationships") or []:
        if relationship.get("Type") == "CHILD":
            ids.extend(relationship.get("Ids") or [])
    return ids


def _top(block: Dict[str, Any]) -> Optional[float]:
    bounding_box = (block.get("Geometry") or {}).get("BoundingBox") or {}
    return bounding_box.get("Top")


def _cell_text(block: Dict[str, Any], words_by_id: Dict[str, str]) -> str:
    if block.get("Text"):
        return str(block["Text"]).strip()
    words = [words_by_id.get(child_id, "") for child_id in _child_ids(block)]
    return " ".join(w for w in words if w).strip()


def normalize_textract_blocks(raw_blocks: List[Dict[str, Any]]) -> List[OCRBlock]:
    """
    Convert Textract's Blocks list into typed OCR blocks, preserving order.

    Args:
        raw_blocks: The "Blocks" array of an AnalyzeDocument response

    Returns:
        List of LineBlock / TableBlock / CellBlock
    """
    words_by_id = {
        block.get("Id"): block.get("Text") or ""
        for block in raw_blocks
        if block.get("BlockType") == BlockType.WORD.value and block.get("Id")
    }

    decoded: List[OCRBlock] = []
    skipped_cells = 0
    for block in raw_blocks:
        block_type = block.get("BlockType")
        block_id = block.get("Id") or ""

        if block_type == BlockType.LINE.value:
            text = block.get("Text")
            if text:
                decoded.append(LineBlock(text=text, block_id=block_id, top=_top(block)))
        elif block_type == BlockType.TABLE.value:
            decoded.append(TableBlock(block_id=block_id, child_ids=tuple(_child_ids(block))))
        elif block_type == BlockType.CELL.value:
            if block.get("RowIndex") is None:
                skipped_cells += 1
                continue
            decoded.append(CellBlock(
                row_index=int(block["RowIndex"]),
                column_index=int(block.get("ColumnIndex") or 0),
                text=_cell_text(block, words_by_id),
                block_id=block_id,
            ))

    if skipped_cells:
        logger.debug(f"Skipped {skipped_cells} CELL blocks without RowIndex")
    logger.info(f"Normalized {len(raw_blocks)} Textract blocks into {len(decoded)} OCR blocks")
    return decoded
