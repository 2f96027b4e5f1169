"""Structlog processors."""

from typing import Any

from opentelemetry import trace

# Keys whose values must never reach a log sink
_REDACTED_KEYS = frozenset({"password", "token", "jwt", "cookie"})


def add_trace_context(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add trace_id and span_id of the active span to a log event.

    Args:
        logger: The logger instance (unused, required by structlog API).
        method_name: The log method name (unused, required by structlog API).
        event_dict: The log event dictionary to enrich.

    Returns:
        The event dictionary, with trace context if a span is active.
    """
    span_context = trace.get_current_span().get_span_context()

    if span_context.is_valid:
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")

    return event_dict


def redact_secrets(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask credential values passed to a logger by mistake."""
    for key in _REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[REDACTED]"
    return event_dict
