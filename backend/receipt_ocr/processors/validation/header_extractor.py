"""
Header Extractor: Store name, store location and purchase date.
"""
from datetime import datetime
from typing import List, Optional
import logging
import re

logger = logging.getLogger(__name__)

PURCHASE_DATE_PATTERN = re.compile(r'\b(\d{2}/\d{2}/\d{2,4})\b')
HAS_LETTER_PATTERN = re.compile(r'[a-zA-Z]')
DIGITS_ONLY_PATTERN = re.compile(r'^\d+$')

# Currency label some tills print on its own line above the items
CURRENCY_LABEL = "GBP"
STORE_NAME_SKIP_WORDS = ["receipt", "tel"]
UNKNOWN_STORE = "Unknown Store"


def _looks_like_text(text: str) -> bool:
    return (
        text != CURRENCY_LABEL
        and bool(HAS_LETTER_PATTERN.search(text))
        and not DIGITS_ONLY_PATTERN.match(text)
    )


def extract_store_name(header_lines: List[str]) -> Optional[str]:
    """
    Pick the store name from the header window.

    The first line longer than 2 characters that contains a letter and is
    not a receipt title or telephone line.
    """
    for line in header_lines:
        text = (line or "").strip()
        lowered = text.lower()
        if len(text) > 2 and _looks_like_text(text) and not any(w in lowered for w in STORE_NAME_SKIP_WORDS):
            logger.debug(f"Store name candidate: '{text}'")
            return text
    return None


def extract_store_location(header_lines: List[str]) -> Optional[str]:
    """Pick the store location from the two lines after the first header line."""
    for line in header_lines[1:3]:
        text = (line or "").strip()
        if len(text) > 3 and _looks_like_text(text):
            return text
    return None


def extract_purchase_date(lines: List[str]) -> Optional[str]:
    """Find the first DD/MM/YY or DD/MM/YYYY date in the image, as printed."""
    for line in lines:
        match = PURCHASE_DATE_PATTERN.search(line or "")
        if match:
            return match.group(1)
    return None


def resolve_store_name(extracted: Optional[str], fallback: Optional[str]) -> str:
    """Prefer the OCR store name; use the caller's name unless it is blank or a placeholder."""
    if extracted:
        return extracted
    if fallback and fallback.strip() and fallback.strip() != UNKNOWN_STORE:
        return fallback.strip()
    return ""


def normalize_purchase_date(date_text: Optional[str]) -> Optional[str]:
    """
    Convert a printed DD/MM/YY or DD/MM/YYYY date to ISO YYYY-MM-DD.

    Two-digit years are read as 20YY. Returns None for anything that is not
    a real calendar date.
    """
    if not date_text:
        return None

    parts = date_text.split("/")
    if len(parts) != 3:
        return None

    day, month, year = parts
    if len(year) == 2:
        year = f"20{year}"
    if len(day) != 2 or len(month) != 2 or len(year) != 4:
        return None

    try:
        parsed = datetime.strptime(f"{year}-{month}-{day}", "%Y-%m-%d")
    except ValueError:
        logger.warning(f"Printed purchase date is not a valid date: '{date_text}'")
        return None
    return parsed.strftime("%Y-%m-%d")
