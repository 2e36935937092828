# sheet_i18n/shared/observability.py
import structlog
from opentelemetry import trace

from sheet_i18n.shared.config import settings

logger = structlog.get_logger()

def setup_telemetry(service_name: str = settings.OTEL_SERVICE_NAME):
    """
    Initializes the OpenTelemetry SDK with OTLP export.
    Does nothing unless an OTLP endpoint is configured; spans are then no-ops.
    """
    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.debug("telemetry_disabled", reason="no OTLP endpoint configured")
        return

    # Imported lazily: the SDK is only needed when exporting
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    resource = Resource.create(attributes={
        "service.name": service_name,
        "deployment.environment": settings.APP_ENV.value,
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{settings.OTEL_EXPORTER_OTLP_ENDPOINT}/v1/traces"))
    )
    if settings.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    logger.info("telemetry_enabled", service=service_name)

def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation in Use Cases.
    Usage:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("my_custom_logic"):
            ...
    """
    return trace.get_tracer(name)
