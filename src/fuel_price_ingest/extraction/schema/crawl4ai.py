# ABOUTME: Crawl4AI-based schema extraction client for the fuel price
# ABOUTME: Describes the wanted value as a typed pydantic field and lets the LLM provider find it on the page

import json
from typing import Any

from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig, LLMConfig, LLMExtractionStrategy
from pydantic import BaseModel, Field, ValidationError, create_model

from fuel_price_ingest.config import get_config
from fuel_price_ingest.core.models import Confidence, ExtractedValue, SchemaDescriptor
from fuel_price_ingest.core.normalize import normalize_price
from fuel_price_ingest.extraction.base import ExtractionError
from fuel_price_ingest.utils.logging import get_logger, log_api_call, suppress_library_output

VALUE_TYPES: dict[str, type] = {"number": float, "integer": int, "string": str}


def build_schema_model(schema: SchemaDescriptor) -> type[BaseModel]:
    """Build a one-field pydantic model from a schema descriptor."""
    python_type = VALUE_TYPES[schema.value_type]
    return create_model(
        "FuelPriceExtraction",
        **{schema.field_name: (python_type, Field(description=schema.description))},
    )


class SchemaExtractionClient:
    """Extracts a single typed value from a page through an LLM extraction service."""

    def __init__(
        self,
        api_key: str | None = None,
        llm_provider: str | None = None,
        headless: bool = True,
        page_timeout: float = 60.0,
    ):
        """Initialize the client.

        Args:
            api_key: API key for the LLM provider (defaults to config.llm_api_key)
            llm_provider: LLM provider string for crawl4ai (defaults to config.llm_provider)
            headless: Whether to run the crawler's browser in headless mode
            page_timeout: Seconds crawl4ai may spend loading the page
        """
        self.logger = get_logger(__name__)
        config = get_config()

        final_api_key = api_key or config.llm_api_key
        if not final_api_key:
            raise ExtractionError("API key required - set FUEL_PRICE_LLM_API_KEY or pass api_key parameter")

        self.llm_config = LLMConfig(provider=llm_provider or config.llm_provider, api_token=final_api_key)
        self.headless = headless
        self.page_timeout = page_timeout

        self.logger.info("Initialized schema extraction client", llm_provider=self.llm_config.provider)

    async def extract_by_schema(
        self, url: str, schema: SchemaDescriptor, *, floor: float = 0.0, ceiling: float = 20.0
    ) -> ExtractedValue | None:
        """Extract the schema field from ``url`` as an inferred price.

        Returns:
            The validated price, or None when the field is absent or unusable

        Raises:
            ExtractionError: If the service reports failure
        """
        raw = await self.fetch_field(url, schema)
        return normalize_price(raw, Confidence.INFERRED, floor=floor, ceiling=ceiling)

    @log_api_call("crawl4ai")
    async def fetch_field(self, url: str, schema: SchemaDescriptor) -> Any | None:
        """Ask the extraction service for ``schema.field_name`` on ``url``.

        Returns:
            The value coerced to the schema's type, or None when the service
            found nothing usable

        Raises:
            ExtractionError: If the service reports failure (reason passed through verbatim)
        """
        model = build_schema_model(schema)

        self.logger.info(
            "Configuring LLM extraction strategy", url=url, field=schema.field_name, value_type=schema.value_type
        )

        llm_strategy = LLMExtractionStrategy(
            llm_config=self.llm_config,
            schema=model.model_json_schema(),
            extraction_type="schema",
            instruction=schema.instruction,
            apply_chunking=False,
            input_format="markdown",
            extra_args={"temperature": 0.0},
        )

        crawl_config = CrawlerRunConfig(
            extraction_strategy=llm_strategy,
            cache_mode=CacheMode.BYPASS,
            wait_until="networkidle",
            page_timeout=int(self.page_timeout * 1000),
        )
        browser_cfg = BrowserConfig(headless=self.headless)

        try:
            # Suppress all console output from crawl4ai
            with suppress_library_output():
                async with AsyncWebCrawler(config=browser_cfg) as crawler:
                    result = await crawler.arun(url=url, config=crawl_config)
        except Exception as e:
            self.logger.error(
                "Unexpected error during extraction", error=str(e), error_type=type(e).__name__, url=url
            )
            raise ExtractionError(f"Unexpected error during extraction: {e}") from e

        if not result:
            raise ExtractionError("Extraction service returned no result")

        if not result.success:
            self.logger.error("Extraction service reported failure", url=url, error_message=result.error_message)
            raise ExtractionError(result.error_message or "Extraction service reported failure without a reason")

        return self._parse_extracted_content(result.extracted_content, schema, model)

    def _parse_extracted_content(self, content: str | None, schema: SchemaDescriptor, model: type[BaseModel]) -> Any:
        if not content:
            self.logger.warning("Extraction service returned empty content")
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self.logger.error("Failed to parse JSON from extracted content", content_preview=content[:200])
            raise ExtractionError(f"Failed to parse extracted content as JSON: {e}") from e

        items = data if isinstance(data, list) else [data]

        for item in items:
            if isinstance(item, dict) and item.get("error"):
                raise ExtractionError(str(item.get("content") or "Extraction service returned an error block"))

        for i, item in enumerate(items):
            if not isinstance(item, dict) or schema.field_name not in item:
                continue
            try:
                parsed = model.model_validate(item)
            except ValidationError as e:
                self.logger.warning("Extracted value failed type coercion", item_index=i, validation_error=str(e))
                continue

            value = getattr(parsed, schema.field_name)
            self.logger.info("Extracted value from schema", field=schema.field_name, value=value)
            return value

        self.logger.warning("Schema field missing from extracted content", field=schema.field_name, items=len(items))
        return None
