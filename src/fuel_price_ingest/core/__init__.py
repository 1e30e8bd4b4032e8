# ABOUTME: Business logic and orchestration layer
# ABOUTME: Domain models, price normalization and the pipeline state machine

"""
Core Layer: Domain models and workflow orchestration

This layer handles:
- Extraction tasks, extracted values and the persisted artifact shape
- Validation of raw prices before they are trusted
- Running a task end to end and recording its provenance

Data Flow: extraction/ values → Normalization → persistence/ artifact
"""

from .models import (
    Confidence,
    DomSelector,
    ExtractedValue,
    ExtractionTask,
    IngestionArtifact,
    RenderedDocument,
    RunReport,
    RunState,
    SchemaDescriptor,
)

# Import the orchestrator on-demand to avoid circular imports
# Use: from fuel_price_ingest.core.pipeline import PipelineOrchestrator

__all__ = [
    "Confidence",
    "DomSelector",
    "ExtractedValue",
    "ExtractionTask",
    "IngestionArtifact",
    "RenderedDocument",
    "RunReport",
    "RunState",
    "SchemaDescriptor",
]
