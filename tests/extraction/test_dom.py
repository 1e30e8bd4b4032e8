# ABOUTME: Tests for the CSS-selector attribute extractor
# ABOUTME: Covers present, missing and blank attributes plus parse failures

import pytest

from fuel_price_ingest.extraction.base import DomParseError
from fuel_price_ingest.extraction.dom import extract_attribute

PAGE = """
<html><body>
  <h3 id="ui-id-7" class="accordion-header active" data-cost="3.47">Indianapolis</h3>
  <h3 id="ui-id-8" data-cost="">Lafayette</h3>
  <h3 id="ui-id-9" data-cost="n/a">Muncie</h3>
</body></html>
"""


class TestExtractAttribute:
    """Attribute lookup over a static snapshot."""

    def test_returns_exact_attribute_string(self):
        assert extract_attribute(PAGE, "#ui-id-7", "data-cost") == "3.47"

    def test_selector_absent_returns_none(self):
        assert extract_attribute(PAGE, "#ui-id-42", "data-cost") is None

    def test_attribute_missing_returns_none(self):
        assert extract_attribute(PAGE, "#ui-id-7", "data-price") is None

    def test_blank_attribute_returns_none(self):
        assert extract_attribute(PAGE, "#ui-id-8", "data-cost") is None

    def test_non_numeric_attribute_is_returned_verbatim(self):
        # Validation happens downstream
        assert extract_attribute(PAGE, "#ui-id-9", "data-cost") == "n/a"

    def test_first_match_wins(self):
        assert extract_attribute(PAGE, "h3[data-cost]", "data-cost") == "3.47"

    def test_multi_valued_attribute_joined(self):
        assert extract_attribute(PAGE, "#ui-id-7", "class") == "accordion-header active"

    def test_empty_document_returns_none(self):
        assert extract_attribute("", "#ui-id-7", "data-cost") is None

    def test_invalid_selector_raises_parse_error(self):
        with pytest.raises(DomParseError, match="Invalid CSS selector"):
            extract_attribute(PAGE, "#ui-id-7[", "data-cost")

    def test_non_text_document_raises_parse_error(self):
        with pytest.raises(DomParseError, match="Expected HTML text"):
            extract_attribute(b"<html></html>", "#ui-id-7", "data-cost")  # type: ignore[arg-type]

    @pytest.mark.parametrize("cost", ["0.99", "3.47", "12.05"])
    def test_numeric_values_round_trip_unchanged(self, cost):
        html = f'<div><span id="ui-id-7" data-cost="{cost}"></span></div>'
        assert extract_attribute(html, "#ui-id-7", "data-cost") == cost
