"""OpenTelemetry tracing setup."""

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from groupkeeper.config import Settings

logger = logging.getLogger(__name__)


class TelemetryManager:
    """Owns the tracer provider for the lifetime of the process."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.tracer_provider: TracerProvider | None = None

    def setup(self) -> None:
        """Initialize tracing if enabled."""
        if not self.settings.otel_enabled:
            logger.info("OpenTelemetry is disabled")
            return

        resource = Resource.create(
            {
                "service.name": self.settings.otel_service_name,
                "deployment.environment": self.settings.environment,
                **self.settings.get_resource_attributes(),
            }
        )
        self.tracer_provider = TracerProvider(resource=resource)

        exporter = self.settings.otel_traces_exporter
        if exporter == "otlp":
            endpoint = self.settings.otel_exporter_otlp_endpoint
            if not endpoint.endswith("/v1/traces"):
                endpoint = f"{endpoint}/v1/traces"
            self.tracer_provider.add_span_processor(
                BatchSpanProcessor(
                    OTLPSpanExporter(endpoint=endpoint, headers=self.settings.get_otlp_headers())
                )
            )
            logger.info("OTLP trace exporter configured: %s", endpoint)
        elif exporter == "console":
            self.tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Console trace exporter configured")

        trace.set_tracer_provider(self.tracer_provider)

    def shutdown(self) -> None:
        """Flush and shut down the tracer provider."""
        if self.tracer_provider:
            self.tracer_provider.shutdown()
            logger.info("OpenTelemetry shutdown complete")
