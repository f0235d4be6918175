"""
Discount Classifier: Tell purchases apart from discount and promotion lines.

Used both while parsing free-text lines and as the final filter over all
accumulated items, so the two stages always agree.
"""
from typing import Dict, Any, Union
import logging
import re

from ..core.structures import ParsedLineItem

logger = logging.getLogger(__name__)

DISCOUNT_KEYWORDS = [
    "discount", "saving", "offer", "clubcard", "nectar",
    "more points", "voucher", "promo",
]

DISCOUNT_PATTERN = re.compile(
    "|".join(re.escape(keyword) for keyword in DISCOUNT_KEYWORDS),
    re.IGNORECASE,
)


def is_discount_candidate(name: str, price: float) -> bool:
    """
    Check whether a name/price pair is a discount or promotion line.

    True for any negative price, or when the name contains a discount
    keyword (case-insensitive substring match).
    """
    if price < 0:
        return True
    return bool(DISCOUNT_PATTERN.search((name or "").lower()))


def is_discount_only(item: Union[ParsedLineItem, Dict[str, Any]]) -> bool:
    """Apply is_discount_candidate to a parsed item (or its dict form)."""
    if isinstance(item, ParsedLineItem):
        return is_discount_candidate(item.name, item.total_price)
    return is_discount_candidate(item.get("name", ""), float(item.get("total_price") or 0))
