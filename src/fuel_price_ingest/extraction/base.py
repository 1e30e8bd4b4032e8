# ABOUTME: Protocol interface for extraction strategies and the pipeline error taxonomy
# ABOUTME: Absent values are None; everything that goes wrong on the way is a PipelineError

from collections.abc import Callable
from typing import Protocol

from fuel_price_ingest.core.models import ExtractedValue, RunState

StateCallback = Callable[[RunState], None]


class ExtractionStrategy(Protocol):
    """Protocol for obtaining the fuel price from a source URL.

    Implementations report the stages they enter through ``on_state`` so the
    orchestrator can record the run's state machine.
    """

    @property
    def descriptor(self) -> str:
        """Provenance string recorded in the artifact."""
        ...

    async def extract(self, url: str, on_state: StateCallback) -> ExtractedValue | None:
        """Extract a validated price from the given URL.

        Args:
            url: Page to extract from
            on_state: Called with each RunState the strategy enters

        Returns:
            The validated price, or None when the value is absent or unusable

        Raises:
            PipelineError: If rendering or extraction fails
        """
        ...


class PipelineError(Exception):
    """Base class for failures the orchestrator downgrades to a null artifact."""

    pass


class RenderError(PipelineError):
    """Raised when the page could not be rendered."""

    pass


class RenderTimeout(RenderError):
    """Raised when navigation or the network-idle wait exceeds its bound."""

    pass


class NavigationError(RenderError):
    """Raised when the page is unreachable (DNS, connection, HTTP error status)."""

    pass


class DomParseError(PipelineError):
    """Raised when the HTML or selector cannot be parsed at all."""

    pass


class ExtractionError(PipelineError):
    """Raised when the extraction service rejects or fails the request.

    The message is the service's reason, verbatim.
    """

    pass
