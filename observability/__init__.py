"""Observability infrastructure: logging context and optional tracing.

setup_logging:
    Console + rotating file logging, text or JSON, with run-id context.

set_run_context / clear_context:
    Tag every log line of one pipeline operation with a run id.

setup_tracing / trace_operation:
    Optional Logfire spans (pip install logfire, ENABLE_LOGFIRE=true).

Example:
    >>> from observability import setup_logging, trace_operation
    >>> setup_logging(config)
    >>> with trace_operation("discover"):
    ...     pass
"""

from observability.logging import setup_logging, set_run_context, clear_context
from observability.tracing import setup_tracing, trace_operation, TracingContext

__all__ = [
    "setup_logging",
    "set_run_context",
    "clear_context",
    "setup_tracing",
    "trace_operation",
    "TracingContext",
]
