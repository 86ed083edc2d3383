"""Observability helpers: structured logging and OpenTelemetry tracing."""

from analyzer_compiler.observability.context import analyzer_context, get_trace_context, trace_context
from analyzer_compiler.observability.logging import JsonFormatter, configure_logging
from analyzer_compiler.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "JsonFormatter",
    "analyzer_context",
    "configure_logging",
    "create_span",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "trace_context",
]
