# ABOUTME: Pipeline orchestrator sequencing extraction strategies and the artifact writer
# ABOUTME: Downgrades render/extraction failures to a null artifact; only PersistenceError escapes

import asyncio
from collections.abc import Callable
from pathlib import Path

from fuel_price_ingest.config import Config, get_config
from fuel_price_ingest.core.models import (
    DomSelector,
    ExtractedValue,
    ExtractionMethod,
    ExtractionTask,
    IngestionArtifact,
    RunReport,
    RunState,
    SchemaDescriptor,
)
from fuel_price_ingest.extraction.base import ExtractionStrategy, PipelineError
from fuel_price_ingest.extraction.strategies import build_strategy
from fuel_price_ingest.persistence.artifact import ArtifactWriter, WriteMode
from fuel_price_ingest.utils.logging import get_logger, with_pipeline_context

StrategyFactory = Callable[[ExtractionMethod, Config], ExtractionStrategy]


class PipelineOrchestrator:
    """Runs one ExtractionTask end to end and always leaves an artifact behind.

    State machine for a single run:

        start → [rendering →] extracting → writing → done

    A failure while rendering or extracting moves to ``failed`` and then on to
    ``writing`` with an absent value, so provenance is recorded either way.
    With a fallback method the next strategy is tried before giving up.
    """

    def __init__(
        self,
        writer: ArtifactWriter | None = None,
        strategy_factory: StrategyFactory = build_strategy,
        deadline_seconds: float | None = None,
        config: Config | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            writer: Artifact writer (defaults to a writer with a UTC wall clock)
            strategy_factory: Builds the strategy variant for a method descriptor
            deadline_seconds: Bound on the whole extraction phase (defaults to config)
            config: Application configuration (defaults to the global config)
        """
        self.config = config or get_config()
        self.writer = writer or ArtifactWriter()
        self.strategy_factory = strategy_factory
        self.deadline_seconds = (
            deadline_seconds if deadline_seconds is not None else self.config.run_deadline_seconds
        )
        self.logger = get_logger(__name__)

    async def run(
        self, task: ExtractionTask, artifact_path: Path, mode: WriteMode = WriteMode.OVERWRITE
    ) -> RunReport:
        """Execute the task and write its artifact.

        Raises:
            PersistenceError: If the artifact cannot be written
        """
        states = [RunState.START]

        def on_state(state: RunState) -> None:
            states.append(state)
            self.logger.debug("Pipeline state", state=state.value)

        methods = [task.method] if task.fallback is None else [task.method, task.fallback]

        with with_pipeline_context("fuel_price", url=task.source_url) as logger:
            logger.info("Starting pipeline", methods=[m.descriptor for m in methods])

            value: ExtractedValue | None = None
            reason: str | None = None
            failed = False
            descriptor = task.method.descriptor

            deadline = asyncio.timeout(self.deadline_seconds)
            try:
                async with deadline:
                    for index, method in enumerate(methods):
                        descriptor = method.descriptor
                        if index > 0:
                            logger.warning("Falling back to next strategy", method=descriptor, previous_reason=reason)

                        try:
                            strategy = self.strategy_factory(method, self.config)
                            value = await strategy.extract(task.source_url, on_state)
                        except PipelineError as e:
                            failed, reason = True, str(e)
                            logger.warning(
                                "Extraction failed", method=descriptor, reason=reason, error_type=type(e).__name__
                            )
                            continue

                        if value is not None:
                            failed, reason = False, None
                            break

                        failed, reason = False, f"No usable value extracted via {descriptor}"
                        logger.warning("Extracted value absent", method=descriptor)
            except TimeoutError:
                if not deadline.expired():
                    raise
                failed, reason = True, f"Run deadline of {self.deadline_seconds}s exceeded"
                logger.warning("Extraction aborted", method=descriptor, reason=reason)
                value = None

            if failed:
                on_state(RunState.FAILED)

            on_state(RunState.WRITING)
            artifact = IngestionArtifact(
                url=task.source_url,
                method_descriptor=descriptor,
                extracted_value=value.value if value else None,
                confidence=value.confidence if value else None,
                captured_at=self.writer.clock(),
                failure_reason=reason,
            )
            written = await self.writer.write(artifact, artifact_path, mode)
            on_state(RunState.DONE)

            logger.info(
                "Pipeline complete",
                extracted_value=written.extracted_value,
                confidence=written.confidence.value if written.confidence else None,
                states=[s.value for s in states],
            )
            return RunReport(artifact=written, artifact_path=Path(artifact_path), states=states)


def task_from_config(config: Config | None = None) -> ExtractionTask:
    """Build the configured ExtractionTask, including the fallback method when enabled."""
    config = config or get_config()
    dom = DomSelector(selector=config.dom_selector, attribute=config.dom_attribute)
    schema = SchemaDescriptor(
        field_name=config.schema_field_name,
        value_type=config.schema_value_type,
        description=config.schema_description,
        instruction=config.schema_instruction,
    )

    primary, secondary = (dom, schema) if config.strategy == "dom" else (schema, dom)
    return ExtractionTask(
        source_url=config.source_url,
        method=primary,
        fallback=secondary if config.fallback_enabled else None,
    )
