# ABOUTME: Logging configuration and structured logger utilities
# ABOUTME: Provides loguru sinks, structlog loggers and timing decorators for the pipeline

from .config import LoggingMode, configure_logging, get_logging_status, suppress_library_output
from .utils import get_logger, log_api_call, log_extraction_step, with_pipeline_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "get_logging_status",
    "suppress_library_output",
    # Utilities
    "get_logger",
    "log_api_call",
    "log_extraction_step",
    "with_pipeline_context",
]
