# ABOUTME: Artifact persistence layer
# ABOUTME: Single JSON file per run, overwritten each time - no history is kept

"""
Persistence Layer: Durable record of each run

This layer handles:
- Deterministic JSON serialization of the ingestion artifact
- Atomic overwrite of the artifact file
- Reading the artifact back for the CLI and the /api/gas_price payload

Data Flow: core/ orchestrator → JSON artifact → downstream consumer
"""

from .artifact import (
    ArtifactWriter,
    PersistenceError,
    WriteMode,
    gas_price_payload,
    read_artifact,
    serialize_artifact,
)

__all__ = [
    "ArtifactWriter",
    "PersistenceError",
    "WriteMode",
    "gas_price_payload",
    "read_artifact",
    "serialize_artifact",
]
