# ABOUTME: Domain models for the fuel price pipeline - tasks, extracted values and artifacts
# ABOUTME: Pipeline state enum plus the JSON artifact shape handed to the /api/gas_price consumer

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class RunState(str, Enum):
    """States a single pipeline run moves through."""

    START = "start"
    RENDERING = "rendering"
    EXTRACTING = "extracting"
    FAILED = "failed"
    WRITING = "writing"
    DONE = "done"


class Confidence(str, Enum):
    """How an extracted price was obtained."""

    EXACT = "exact"  # DOM attribute found
    INFERRED = "inferred"  # AI-extracted


class DomSelector(BaseModel):
    """Locate the price as an attribute on an element matched by a CSS selector."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dom"] = "dom"
    selector: str
    attribute: str

    @property
    def descriptor(self) -> str:
        return f"dom:{self.selector}@{self.attribute}"


class SchemaDescriptor(BaseModel):
    """Describe the price as a typed field for the schema extraction service."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["schema"] = "schema"
    field_name: str
    value_type: Literal["number", "integer", "string"] = "number"
    description: str
    instruction: str = Field(
        default="Extract the requested value from the page.",
        description="Natural-language prompt sent with the schema",
    )

    @property
    def descriptor(self) -> str:
        return f"schema:{self.field_name}:{self.value_type}"


ExtractionMethod = Annotated[DomSelector | SchemaDescriptor, Field(discriminator="kind")]


class ExtractionTask(BaseModel):
    """One pipeline run: where to look and how to extract."""

    model_config = ConfigDict(frozen=True)

    source_url: str
    method: ExtractionMethod
    fallback: ExtractionMethod | None = None


class RenderedDocument(BaseModel):
    """HTML snapshot taken once client-side rendering settled."""

    model_config = ConfigDict(frozen=True)

    url: str
    html: str
    rendered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ExtractedValue(BaseModel):
    """A validated price in currency per gallon."""

    model_config = ConfigDict(frozen=True)

    value: float
    confidence: Confidence


class IngestionArtifact(BaseModel):
    """Persisted record of a run: the value (or its absence) plus provenance.

    Field order is the serialized key order.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url: str
    method_descriptor: str
    extracted_value: float | None = None
    confidence: Confidence | None = None
    captured_at: datetime
    failure_reason: str | None = None

    @field_serializer("captured_at")
    def _serialize_captured_at(self, value: datetime) -> str:
        return format_timestamp(value)

    @property
    def has_value(self) -> bool:
        return self.extracted_value is not None


class RunReport(BaseModel):
    """What a run left behind and the states it went through."""

    artifact: IngestionArtifact
    artifact_path: Path
    states: list[RunState]

    @property
    def succeeded(self) -> bool:
        return self.artifact.has_value


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
