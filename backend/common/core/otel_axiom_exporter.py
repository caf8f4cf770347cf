from typing import Any, Dict
import functools
import inspect
import logging
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from common.core.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
)

# Arguments copied onto spans so traces can be filtered per account / payment
SPAN_ATTRIBUTE_ARGS = ("account_id", "session_ref", "job_id", "plan_id")

_initialized = False
tracer = None


def init_telemetry() -> None:
    """Install the tracer provider once per process."""
    global _initialized, tracer

    if _initialized:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.otel_service_name,
            SERVICE_VERSION: settings.otel_service_version,
        }
    )

    provider = TracerProvider(resource=resource)
    if settings.axiom_token:
        exporter = OTLPSpanExporter(
            endpoint=settings.otel_traces_endpoint,
            headers={
                "Authorization": f"Bearer {settings.axiom_token}",
                "X-Axiom-Dataset": settings.axiom_dataset,
            },
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    tracer = trace.get_tracer(settings.otel_service_name)

    logging.getLogger().setLevel(settings.log_level)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance. Ensures telemetry is initialized.
    Use this instead of logging.getLogger() directly.
    """
    if not _initialized:
        init_telemetry()
    return logging.getLogger(name)


def _span_attributes(signature: inspect.Signature, args, kwargs) -> Dict[str, Any]:
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {}
    attributes = {}
    for name in SPAN_ATTRIBUTE_ARGS:
        value = bound.arguments.get(name)
        if value is not None:
            attributes[f"billing.{name}"] = str(value)
    return attributes


def trace_span(func):
    """Wrap a function in a span named ``Class.method``.

    Identifying arguments (account, payment session, job, plan) are recorded
    as span attributes when the wrapped call receives them.
    """
    signature = inspect.signature(func)
    qualname = func.__qualname__

    def _start(args, kwargs):
        if not _initialized:
            init_telemetry()
        return tracer.start_as_current_span(
            qualname, attributes=_span_attributes(signature, args, kwargs)
        )

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        with _start(args, kwargs):
            return func(*args, **kwargs)

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        with _start(args, kwargs):
            return await func(*args, **kwargs)

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
