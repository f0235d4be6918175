"""
Workflow Processor: Complete receipt extraction workflow for one request.

Workflow:
1. Check Textract credentials (fatal if missing)
2. For each image URL, in order: download, Textract AnalyzeDocument (TABLES)
3. Decode blocks and parse the image
4. Fold per-image results and build the reconciliation report

Images that cannot be downloaded or that Textract rejects are skipped.
Any other Textract failure aborts the request.
"""
from typing import List, Optional
import logging

from ..errors import ImageFetchError, UnreadableImageError
from ..processors.core.structures import ImageParseResult, ReceiptExtractionResult
from ..processors.validation.pipeline import (
    build_extraction_result, fold_image_results, parse_image_blocks,
)
from ..services.ocr.image_fetcher import create_http_client, fetch_image_bytes
from ..services.ocr.ocr_normalizer import normalize_textract_blocks
from ..services.ocr.textract_client import analyze_document, ensure_credentials

logger = logging.getLogger(__name__)


def process_receipt_images(
    image_urls: List[str],
    store_name: Optional[str] = None,
    total_amount: Optional[float] = None
) -> ReceiptExtractionResult:
    """
    Extract items and reconciliation data from a request's receipt images.

    Args:
        image_urls: Image URLs, processed sequentially in this order
        store_name: Fallback store name when none is printed
        total_amount: Fallback total when none is printed

    Returns:
        ReceiptExtractionResult (possibly with no items)

    Raises:
        OCRConfigurationError: Textract credentials are missing
        OCRServiceError: Textract call failed
    """
    ensure_credentials()

    image_results: List[ImageParseResult] = []
    with create_http_client() as client:
        for index, url in enumerate(image_urls, start=1):
            logger.info(f"Processing image {index}/{len(image_urls)}: {url}")
            try:
                image_bytes = fetch_image_bytes(url, client)
                raw_blocks = analyze_document(image_bytes)
            except ImageFetchError as e:
                logger.warning(f"Skipping image {index}: {e}")
                continue
            except UnreadableImageError as e:
                logger.warning(f"Skipping image {index}: Textract could not read it ({e})")
                continue

            if not raw_blocks:
                logger.warning(f"Skipping image {index}: Textract returned no blocks")
                continue

            image_result = parse_image_blocks(normalize_textract_blocks(raw_blocks))
            logger.info(
                f"Image {index}: mode={image_result.mode.value}, items={len(image_result.items)}"
            )
            image_results.append(image_result)

    accumulator = fold_image_results(image_results)
    return build_extraction_result(accumulator, store_name=store_name, total_amount=total_amount)
