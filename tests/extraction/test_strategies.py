# ABOUTME: Tests for the DOM scrape and schema AI strategy variants
# ABOUTME: Checks state reporting, confidence tagging and strategy construction from config

from unittest.mock import AsyncMock, MagicMock

import pytest

from fuel_price_ingest.config import get_config
from fuel_price_ingest.core.models import Confidence, DomSelector, ExtractedValue, RunState, SchemaDescriptor
from fuel_price_ingest.extraction.base import ExtractionError
from fuel_price_ingest.extraction.render.playwright import NetworkIdlePolicy, PageRenderer
from fuel_price_ingest.extraction.strategies import DomScrapeStrategy, SchemaAIStrategy, build_strategy

DOM = DomSelector(selector="#ui-id-7", attribute="data-cost")
SCHEMA = SchemaDescriptor(field_name="indianapolis_gas_price", description="The Indianapolis gas price")
URL = "https://gasprices.aaa.com/?state=IN"


def _dom_strategy(fake, method: DomSelector = DOM) -> DomScrapeStrategy:
    renderer = PageRenderer(
        idle_policy=NetworkIdlePolicy(idle_ms=10), settle_timeout=1.0, playwright_factory=fake.factory
    )
    return DomScrapeStrategy(method, renderer)


class TestDomScrapeStrategy:
    @pytest.mark.asyncio
    async def test_exact_price_from_attribute(self, fake_playwright):
        states = []

        value = await _dom_strategy(fake_playwright).extract(URL, states.append)

        assert value == ExtractedValue(value=3.47, confidence=Confidence.EXACT)
        assert states == [RunState.RENDERING, RunState.EXTRACTING]

    @pytest.mark.asyncio
    async def test_missing_element_is_absent(self, fake_playwright):
        strategy = _dom_strategy(fake_playwright, DomSelector(selector="#ui-id-99", attribute="data-cost"))

        assert await strategy.extract(URL, lambda state: None) is None

    @pytest.mark.asyncio
    async def test_non_numeric_attribute_is_absent(self, make_fake_playwright):
        fake = make_fake_playwright(html='<h3 id="ui-id-7" data-cost="N/A">Indianapolis</h3>')

        assert await _dom_strategy(fake).extract(URL, lambda state: None) is None

    def test_descriptor(self, fake_playwright):
        assert _dom_strategy(fake_playwright).descriptor == "dom:#ui-id-7@data-cost"


class TestSchemaAIStrategy:
    @pytest.mark.asyncio
    async def test_delegates_to_client_with_bounds(self):
        client = MagicMock()
        client.extract_by_schema = AsyncMock(return_value=ExtractedValue(value=3.47, confidence=Confidence.INFERRED))
        strategy = SchemaAIStrategy(SCHEMA, client, floor=1.0, ceiling=10.0)
        states = []

        value = await strategy.extract(URL, states.append)

        assert value.confidence is Confidence.INFERRED
        assert states == [RunState.EXTRACTING]
        client.extract_by_schema.assert_awaited_once_with(URL, SCHEMA, floor=1.0, ceiling=10.0)

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self):
        client = MagicMock()
        client.extract_by_schema = AsyncMock(side_effect=ExtractionError("rate limited"))

        with pytest.raises(ExtractionError, match="rate limited"):
            await SchemaAIStrategy(SCHEMA, client).extract(URL, lambda state: None)


class TestBuildStrategy:
    def test_dom_method_builds_renderer_from_config(self):
        config = get_config().model_copy(update={"idle_ms": 250, "navigation_attempts": 3, "price_ceiling": 15.0})

        strategy = build_strategy(DOM, config)

        assert isinstance(strategy, DomScrapeStrategy)
        assert strategy.renderer.idle_policy == NetworkIdlePolicy(max_connections=2, idle_ms=250)
        assert strategy.renderer.navigation_attempts == 3
        assert strategy.ceiling == 15.0

    def test_schema_method_builds_client(self):
        config = get_config().model_copy(update={"llm_api_key": "test-key"})

        strategy = build_strategy(SCHEMA, config)

        assert isinstance(strategy, SchemaAIStrategy)
        assert strategy.descriptor == "schema:indianapolis_gas_price:number"

    def test_schema_method_without_api_key_raises(self):
        with pytest.raises(ExtractionError, match="API key required"):
            build_strategy(SCHEMA, get_config())

    def test_unknown_method_raises(self):
        with pytest.raises(TypeError, match="Unsupported extraction method"):
            build_strategy(MagicMock(), get_config())
