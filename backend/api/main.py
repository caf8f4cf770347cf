from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.asgi import OpenTelemetryMiddleware

# Tracer provider must be installed before the routers import their services
from common.core.otel_axiom_exporter import init_telemetry, get_logger

init_telemetry()

from common.core.config import settings  # noqa: E402
from common.core.constants import Environment  # noqa: E402
from common.core.exceptions import LockUnavailableError, NotFoundError  # noqa: E402
from common.providers.messaging.factory import close_message_queue  # noqa: E402
from common.providers.rate_limiter.limiter import limiter  # noqa: E402
from api.v1.routes.router import api_router  # noqa: E402
from internal.routes import probes  # noqa: E402

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})")
    yield
    logger.info("Shutting down, closing message queue connection")
    await close_message_queue()


_local = settings.environment == Environment.LOCAL

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs" if _local else None,
    redoc_url="/redoc" if _local else None,
    openapi_url="/openapi.json" if _local else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(LockUnavailableError)
async def lock_unavailable_handler(request: Request, exc: LockUnavailableError):
    # Another request holds the account or payment-session lock
    logger.warning(f"Lock unavailable for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Resource busy, retry shortly"},
        headers={"Retry-After": "1"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


FastAPIInstrumentor.instrument_app(app)
app.add_middleware(OpenTelemetryMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")

# /healthz and /readyz stay at the root, outside the versioned API
app.include_router(probes.router)
