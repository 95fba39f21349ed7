"""
OpenTelemetry Trace Context Management

Carries W3C trace headers inside JSON-RPC messages so that a host can join
the caller's trace.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional, Iterator

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address

    Returns:
        Tracer: Tracer named after the service
    """
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return trace.get_tracer(service_name)


def inject_trace_context() -> Dict[str, str]:
    """Serialize the current trace context into a header dictionary

    Returns:
        Dict: W3C trace headers, empty when no span is active
    """
    carrier: Dict[str, str] = {}
    propagate.inject(carrier)
    return carrier


def extract_trace_context(carrier: Optional[Dict[str, str]]):
    """Rebuild a trace context from a header dictionary

    Args:
        carrier: Headers produced by ``inject_trace_context``

    Returns:
        Context: OpenTelemetry context, or None when there is nothing to extract
    """
    if not carrier:
        return None
    return propagate.extract(carrier)


@contextmanager
def with_trace_context(ctx) -> Iterator[None]:
    """Run the enclosed block with ``ctx`` attached as the current context"""
    if ctx is None:
        yield
        return

    token = otel_context.attach(ctx)
    try:
        yield
    finally:
        otel_context.detach(token)


def create_span(name: str,
                attributes: Optional[Dict[str, Any]] = None,
                kind: trace.SpanKind = trace.SpanKind.INTERNAL):
    """Start a span as the current span

    Args:
        name: Span name
        attributes: Span attributes
        kind: Span kind, CLIENT on the calling side and SERVER on the host

    Returns:
        ContextManager: yields the started span
    """
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(name, kind=kind, attributes=attributes)
