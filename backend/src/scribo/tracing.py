"""OpenTelemetry tracing for requests, provider calls and database statements."""
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from scribo import __version__
from scribo.config import Settings
from scribo.database import engine

# Probe and scrape traffic is not traced
UNTRACED_URLS = "health,metrics"


def setup_tracing(app: FastAPI, settings: Settings) -> TracerProvider:
    """
    Export spans over OTLP/HTTP and instrument the app and its engine.

    Generation calls are wrapped in ``generation.<kind>`` spans by the
    generation service; those spans only leave the process once this has run.

    Args:
        app: FastAPI application instance
        settings: Settings with the collector endpoint and service name

    Returns:
        TracerProvider: The installed provider (flushed on shutdown by the SDK)
    """
    resource = Resource.create(
        {
            SERVICE_NAME: settings.otel_service_name,
            SERVICE_VERSION: __version__,
            DEPLOYMENT_ENVIRONMENT: settings.app_env,
        }
    )
    endpoint = f"{settings.otel_exporter_otlp_endpoint.rstrip('/')}/v1/traces"

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app, excluded_urls=UNTRACED_URLS)
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Tracer for custom spans; spans are no-ops until ``setup_tracing`` runs."""
    return trace.get_tracer(name)
