# ABOUTME: The two ExtractionStrategy variants - deterministic DOM scrape and schema-guided AI extraction
# ABOUTME: build_strategy picks the variant for a method descriptor so the orchestrator stays polymorphic

from fuel_price_ingest.config import Config, get_config
from fuel_price_ingest.core.models import (
    Confidence,
    DomSelector,
    ExtractedValue,
    ExtractionMethod,
    RunState,
    SchemaDescriptor,
)
from fuel_price_ingest.core.normalize import normalize_price
from fuel_price_ingest.extraction.base import ExtractionStrategy, StateCallback
from fuel_price_ingest.extraction.dom import extract_attribute
from fuel_price_ingest.extraction.render.playwright import NetworkIdlePolicy, PageRenderer
from fuel_price_ingest.extraction.schema.crawl4ai import SchemaExtractionClient
from fuel_price_ingest.utils.logging import get_logger


class DomScrapeStrategy:
    """Render the page in a browser, then read the price off a DOM attribute."""

    def __init__(self, method: DomSelector, renderer: PageRenderer, floor: float = 0.0, ceiling: float = 20.0):
        self.method = method
        self.renderer = renderer
        self.floor = floor
        self.ceiling = ceiling
        self.logger = get_logger(__name__)

    @property
    def descriptor(self) -> str:
        return self.method.descriptor

    async def extract(self, url: str, on_state: StateCallback) -> ExtractedValue | None:
        on_state(RunState.RENDERING)
        document = await self.renderer.render(url)

        on_state(RunState.EXTRACTING)
        raw = extract_attribute(document.html, self.method.selector, self.method.attribute)
        if raw is None:
            self.logger.warning(
                "Attribute not found on page", url=url, selector=self.method.selector, attribute=self.method.attribute
            )
            return None

        return normalize_price(raw, Confidence.EXACT, floor=self.floor, ceiling=self.ceiling)


class SchemaAIStrategy:
    """Delegate page understanding to the schema extraction service."""

    def __init__(
        self, method: SchemaDescriptor, client: SchemaExtractionClient, floor: float = 0.0, ceiling: float = 20.0
    ):
        self.method = method
        self.client = client
        self.floor = floor
        self.ceiling = ceiling

    @property
    def descriptor(self) -> str:
        return self.method.descriptor

    async def extract(self, url: str, on_state: StateCallback) -> ExtractedValue | None:
        on_state(RunState.EXTRACTING)
        return await self.client.extract_by_schema(url, self.method, floor=self.floor, ceiling=self.ceiling)


def build_strategy(method: ExtractionMethod, config: Config | None = None) -> ExtractionStrategy:
    """Build the strategy variant matching ``method`` from configuration."""
    config = config or get_config()

    if isinstance(method, DomSelector):
        renderer = PageRenderer(
            headless=config.headless,
            idle_policy=NetworkIdlePolicy(max_connections=config.idle_max_connections, idle_ms=config.idle_ms),
            navigation_timeout=config.navigation_timeout,
            settle_timeout=config.settle_timeout,
            navigation_attempts=config.navigation_attempts,
        )
        return DomScrapeStrategy(method, renderer, floor=config.price_floor, ceiling=config.price_ceiling)

    if isinstance(method, SchemaDescriptor):
        client = SchemaExtractionClient(
            api_key=config.llm_api_key,
            llm_provider=config.llm_provider,
            headless=config.headless,
            page_timeout=config.navigation_timeout + config.settle_timeout,
        )
        return SchemaAIStrategy(method, client, floor=config.price_floor, ceiling=config.price_ceiling)

    raise TypeError(f"Unsupported extraction method: {type(method).__name__}")
