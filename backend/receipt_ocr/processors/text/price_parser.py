"""
Price Parser: Convert raw OCR price tokens into signed amounts.

OCR output renders prices inconsistently: with or without currency symbols,
with a comma as decimal separator, or with the decimal point dropped
entirely ("199" for 1.99). parse_price_value never raises; anything it cannot
read becomes 0.0.
"""
import logging
import re

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS_PATTERN = re.compile(r'[£$€\s]')
BARE_INTEGER_PATTERN = re.compile(r'^-?\d+$')
COMMA_DECIMAL_PATTERN = re.compile(r'^-?\d+,\d+$')
NON_NUMERIC_PATTERN = re.compile(r'[^\d.\-]')
LEADING_NUMBER_PATTERN = re.compile(r'^[-+]?(?:\d+(?:\.\d*)?|\.\d+)')

# Bare integers at least this long are read as minor units (pence/cents)
MINOR_UNIT_MIN_DIGITS = 3
# Amounts above this, unless the raw token starts with '-', are assumed to be
# unscaled minor units
UNSCALED_AMOUNT_THRESHOLD = 1000


def parse_price_value(value_text: str) -> float:
    """
    Parse a price token into a signed float.

    Rules, first match wins:
    1. Bare integer of 3+ digits: minor units ("199" -> 1.99, "-450" -> -4.50)
    2. digits,digits: comma is the decimal separator ("4,50" -> 4.50)
    3. Otherwise keep only digits, '.' and '-'

    The sign is decided by the raw token: only a token that starts with '-'
    (after trimming) is negative, so "£-199" reads as 1.99. The leading
    numeric prefix of the cleaned token is then parsed. A result above 1000
    in magnitude is divided by 100 unless the token is negative; this also
    shrinks a genuine large amount such as 1200.00 to 12.00.

    Args:
        value_text: Raw token, e.g. "£3.99", "-199", "4,50"

    Returns:
        Parsed amount, or 0.0 when the token is empty or unreadable
    """
    if not value_text:
        return 0.0

    is_negative = value_text.strip().startswith('-')
    cleaned = CURRENCY_SYMBOLS_PATTERN.sub('', value_text)

    if BARE_INTEGER_PATTERN.match(cleaned) and len(cleaned.lstrip('-')) >= MINOR_UNIT_MIN_DIGITS:
        digits = cleaned.lstrip('-')
        int_part = digits[:-2] or '0'
        sign = '-' if is_negative else ''
        cleaned = f"{sign}{int_part}.{digits[-2:]}"
    elif COMMA_DECIMAL_PATTERN.match(cleaned):
        cleaned = cleaned.replace(',', '.')
    else:
        cleaned = NON_NUMERIC_PATTERN.sub('', cleaned)

    match = LEADING_NUMBER_PATTERN.match(cleaned)
    if not match:
        return 0.0
    parsed = float(match.group(0))

    if abs(parsed) > UNSCALED_AMOUNT_THRESHOLD and not is_negative:
        logger.debug(f"Price token '{value_text}' above {UNSCALED_AMOUNT_THRESHOLD}, reading as minor units")
        return parsed / 100

    return parsed
