# ABOUTME: Validation gate turning raw extracted values into ExtractedValue objects
# ABOUTME: Unparseable, non-finite or out-of-bounds prices are treated exactly like an absent value

import math
import re
from decimal import Decimal, InvalidOperation

from fuel_price_ingest.core.models import Confidence, ExtractedValue
from fuel_price_ingest.utils.logging import get_logger

logger = get_logger(__name__)

DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_price(raw: object) -> float | None:
    """Parse a raw value as a finite decimal number.

    Strings may carry surrounding whitespace and a single leading ``$``.
    Booleans are rejected even though they are ints.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int | float):
        text = repr(raw)
    elif isinstance(raw, str):
        text = raw.strip().removeprefix("$").strip()
    else:
        return None

    if not DECIMAL_PATTERN.fullmatch(text):
        return None

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None

    if not number.is_finite():
        return None

    value = float(number)
    return value if math.isfinite(value) else None


def normalize_price(
    raw: object,
    confidence: Confidence,
    *,
    floor: float = 0.0,
    ceiling: float = 20.0,
) -> ExtractedValue | None:
    """Validate a raw price and attach its confidence, or return None."""
    value = parse_price(raw)
    if value is None:
        logger.warning("Discarding unparseable price", raw_value=repr(raw)[:80], confidence=confidence.value)
        return None

    if not floor < value <= ceiling:
        logger.warning("Discarding out-of-bounds price", value=value, floor=floor, ceiling=ceiling)
        return None

    return ExtractedValue(value=value, confidence=confidence)
