"""Tracing using Logfire/OpenTelemetry.

Optional spans around pipeline operations plus automatic instrumentation of
outbound aiohttp calls (Gemini, Serper, link checks).

Requirements:
    pip install logfire

Enable via configuration:
    ENABLE_LOGFIRE=true
    LOGFIRE_TOKEN=your-token  # Optional for cloud dashboard

Usage:
    >>> from observability.tracing import setup_tracing, trace_operation
    >>> setup_tracing(enabled=True, service_name="ecoscout")
    >>> with trace_operation("discover") as attrs:
    ...     attrs["products"] = 6
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generator

logger = logging.getLogger(__name__)


@dataclass
class TracingContext:
    """Context for tracing operations."""
    enabled: bool = False
    service_name: str = "ecoscout"
    token: str = ""
    _logfire_configured: bool = field(default=False, init=False)


_context = TracingContext()


def setup_tracing(
    enabled: bool = False,
    service_name: str = "ecoscout",
    token: str = "",
) -> TracingContext:
    """Set up tracing with Logfire.

    Args:
        enabled: Whether to enable tracing
        service_name: Name of the service for tracing
        token: Logfire authentication token

    Returns:
        TracingContext for the session
    """
    global _context

    _context.enabled = enabled
    _context.service_name = service_name
    _context.token = token

    if not enabled:
        logger.debug("Tracing disabled")
        return _context
    if _context._logfire_configured:
        return _context

    try:
        import logfire

        logfire.configure(
            service_name=service_name,
            token=token if token else None,
        )

        # Spans for every outbound Gemini/Serper/HEAD request
        logfire.instrument_aiohttp_client()

        _context._logfire_configured = True
        logger.info("Logfire tracing enabled for service: %s", service_name)

    except ImportError:
        logger.warning("Logfire not installed. Tracing disabled.")
        _context.enabled = False
    except Exception as e:
        logger.error("Failed to configure Logfire: %s", e)
        _context.enabled = False

    return _context


@contextmanager
def trace_operation(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[dict[str, Any], None, None]:
    """Context manager for tracing an operation.

    Args:
        name: Name of the operation
        attributes: Optional attributes to attach to the span

    Yields:
        Dictionary for adding additional attributes during the operation
    """
    span_attrs = attributes or {}
    start_time = datetime.now()

    try:
        if _context.enabled and _context._logfire_configured:
            import logfire

            with logfire.span(name, **span_attrs) as span:
                result_attrs: dict[str, Any] = {}
                yield result_attrs

                for key, value in result_attrs.items():
                    span.set_attribute(key, value)
        else:
            # No-op when tracing is disabled
            result_attrs = {}
            yield result_attrs

    finally:
        duration = (datetime.now() - start_time).total_seconds()
        logger.debug("Operation '%s' completed in %.2fs", name, duration)
