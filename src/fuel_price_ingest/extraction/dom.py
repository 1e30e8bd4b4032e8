# ABOUTME: Pure CSS-selector attribute lookup over a static HTML snapshot
# ABOUTME: Returns None when the element or attribute is missing, raises DomParseError on bad input

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from fuel_price_ingest.extraction.base import DomParseError


def extract_attribute(html: str, selector: str, attribute: str) -> str | None:
    """Pull ``attribute`` off the first element matching ``selector``.

    Args:
        html: Rendered HTML document
        selector: CSS selector locating the element
        attribute: Attribute name to read

    Returns:
        The attribute value, or None when nothing matches, the attribute is
        missing, or its value is blank

    Raises:
        DomParseError: If the document is not text or the selector is invalid
    """
    if not isinstance(html, str):
        raise DomParseError(f"Expected HTML text, got {type(html).__name__}")

    soup = BeautifulSoup(html, "lxml")

    try:
        element = soup.select_one(selector)
    except SelectorSyntaxError as e:
        raise DomParseError(f"Invalid CSS selector {selector!r}: {e}") from e

    if element is None:
        return None

    value = element.get(attribute)
    if isinstance(value, list):
        # Multi-valued attributes such as class
        value = " ".join(value)

    if value is None or not value.strip():
        return None
    return value
