from __future__ import annotations

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from octopoz.infrastructure.config import (
    app_env,
    otel_exporter_endpoint,
    otel_sample_ratio,
    otel_service_name,
)

logger = logging.getLogger(__name__)

_provider: TracerProvider | None = None


def current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def _build_provider() -> TracerProvider:
    resource = Resource.create(
        {SERVICE_NAME: otel_service_name(), "deployment.environment": app_env()}
    )
    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(otel_sample_ratio())),
    )
    endpoint = otel_exporter_endpoint()
    if endpoint:
        try:
            exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
        except Exception:
            logger.exception("otel_exporter_setup_failed")
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def configure_otel(app: FastAPI) -> None:
    """Install the process-wide tracer provider once and instrument every app built."""
    global _provider
    if _provider is None:
        _provider = _build_provider()
        trace.set_tracer_provider(_provider)
        set_global_textmap(TraceContextTextMapPropagator())
    FastAPIInstrumentor.instrument_app(
        app, tracer_provider=_provider, excluded_urls="health,metrics"
    )
