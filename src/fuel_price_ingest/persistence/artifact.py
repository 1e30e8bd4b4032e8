# ABOUTME: Writes and reads the single JSON ingestion artifact with deterministic key order
# ABOUTME: Stamps capturedAt at write time and replaces the previous artifact atomically

import asyncio
import json
import os
import tempfile
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fuel_price_ingest.core.models import IngestionArtifact, format_timestamp
from fuel_price_ingest.utils.logging import get_logger


class PersistenceError(Exception):
    """Raised when the artifact cannot be written or read back."""

    pass


class WriteMode(str, Enum):
    """How an existing artifact at the target path is treated."""

    OVERWRITE = "overwrite"
    CREATE = "create"  # refuse to replace an existing artifact


def utcnow() -> datetime:
    return datetime.now(UTC)


def serialize_artifact(artifact: IngestionArtifact) -> str:
    """Render an artifact as stable, indented JSON."""
    payload = artifact.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


class ArtifactWriter:
    """Persists IngestionArtifacts to a JSON file."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self.logger = get_logger(__name__)

    async def write(
        self, artifact: IngestionArtifact, path: Path, mode: WriteMode = WriteMode.OVERWRITE
    ) -> IngestionArtifact:
        """Stamp ``captured_at`` and write the artifact to ``path``.

        Returns:
            The artifact exactly as written

        Raises:
            PersistenceError: On any filesystem failure, or if ``path`` exists in CREATE mode
        """
        stamped = artifact.model_copy(update={"captured_at": self.clock()})
        text = serialize_artifact(stamped)

        try:
            await asyncio.to_thread(self._write_text, Path(path), text, mode)
        except OSError as e:
            self.logger.error("Failed to write artifact", path=str(path), error=str(e), error_type=type(e).__name__)
            raise PersistenceError(f"Could not write artifact to {path}: {e}") from e

        self.logger.info(
            "Wrote artifact",
            path=str(path),
            extracted_value=stamped.extracted_value,
            captured_at=format_timestamp(stamped.captured_at),
        )
        return stamped

    @staticmethod
    def _write_text(path: Path, text: str, mode: WriteMode) -> None:
        if mode == WriteMode.CREATE and path.exists():
            raise FileExistsError(f"Artifact already exists: {path}")

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def read_artifact(path: Path) -> IngestionArtifact:
    """Load an artifact written by ArtifactWriter.

    Raises:
        PersistenceError: If the file is missing, unreadable or not a valid artifact
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Could not read artifact at {path}: {e}") from e

    try:
        return IngestionArtifact.model_validate_json(text)
    except ValidationError as e:
        raise PersistenceError(f"Invalid artifact at {path}: {e}") from e


def gas_price_payload(artifact: IngestionArtifact) -> dict[str, Any]:
    """Shape an artifact into the body served by the /api/gas_price endpoint.

    The calculator frontend reads ``response.data[0].value``.
    """
    return {
        "response": {
            "data": [
                {
                    "period": format_timestamp(artifact.captured_at),
                    "value": artifact.extracted_value,
                }
            ]
        }
    }
