# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to the source page, extraction methods, API key and logging config

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="FUEL_PRICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Source page
    source_url: str = Field(
        default="https://gasprices.aaa.com/?state=IN", description="Page the regional fuel price is scraped from"
    )

    # Strategy selection
    strategy: Literal["dom", "schema"] = Field(default="dom", description="Primary extraction strategy")
    fallback_enabled: bool = Field(
        default=False, description="Try the other strategy when the primary one yields no value"
    )

    # DOM scrape method
    dom_selector: str = Field(default="#ui-id-7", description="CSS selector of the element carrying the price")
    dom_attribute: str = Field(default="data-cost", description="Attribute holding the price on that element")

    # Schema extraction method
    schema_field_name: str = Field(default="indianapolis_gas_price", description="Field name in the extraction schema")
    schema_value_type: Literal["number", "integer", "string"] = Field(
        default="number", description="Type the extraction service must coerce the value to"
    )
    schema_description: str = Field(
        default="The Indianapolis gas price", description="Field description used to disambiguate candidates"
    )
    schema_instruction: str = Field(
        default="Extract the first value in the Indianapolis table from the specified URL.",
        description="Natural-language instruction sent alongside the schema",
    )

    # AI/API Configuration
    llm_api_key: str = Field(default="", description="API key for the schema extraction LLM provider")
    llm_provider: str = Field(
        default="gemini/gemini-2.5-flash-lite", description="LLM provider string understood by crawl4ai"
    )

    # Browser / rendering
    headless: bool = Field(default=True, description="Run the browser engine headless")
    navigation_timeout: float = Field(default=30.0, description="Seconds allowed for the initial navigation")
    settle_timeout: float = Field(default=20.0, description="Seconds allowed for the network to go quiescent")
    idle_max_connections: int = Field(
        default=2, ge=0, description="In-flight requests tolerated while the page is considered idle"
    )
    idle_ms: int = Field(default=500, ge=0, description="Milliseconds the network must stay idle")
    navigation_attempts: int = Field(default=2, ge=1, description="Attempts for transient navigation failures")

    # Pipeline
    run_deadline_seconds: float = Field(default=90.0, gt=0, description="Overall bound on the extraction phase")
    artifact_path: Path = Field(default=Path("data/gas-price.json"), description="Where the JSON artifact is written")
    price_floor: float = Field(default=0.0, description="Prices must be strictly greater than this")
    price_ceiling: float = Field(default=20.0, description="Prices must not exceed this")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
