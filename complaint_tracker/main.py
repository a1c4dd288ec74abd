import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaint_tracker.api.router import api_router, health_router
from complaint_tracker.config import settings
from complaint_tracker.database import complaint_store, identity_store
from complaint_tracker.errors import ComplaintTrackerError
from complaint_tracker.lifecycle import lifecycle
from complaint_tracker.middleware.logging import RequestLoggingMiddleware
from complaint_tracker.middleware.readiness import ReadinessGateMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)

STORES = (identity_store, complaint_store)


async def startup() -> None:
    """Initialize each store's schema, in order, before serving API traffic."""
    lifecycle.reset()
    logger.info("Initializing databases...")
    for store in STORES:
        await store.init_schema()
        lifecycle.mark_store_ready(store.name)


async def shutdown() -> None:
    """Close every connection pool. Safe to call more than once."""
    if not lifecycle.begin_shutdown():
        return
    logger.info("Shutting down gracefully...")
    for store in STORES:
        try:
            await asyncio.wait_for(store.dispose(), timeout=settings.shutdown_timeout_seconds)
        except Exception:
            logger.exception("Timed out or failed closing store '%s'", store.name)
    logger.info("Connections closed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize Sentry if DSN is configured
    if settings.sentry_dsn:
        try:
            import sentry_sdk
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=0.1,
                environment=settings.environment,
            )
            logger.info("Sentry initialized (env=%s)", settings.environment)
        except Exception as e:
            logger.warning("Failed to initialize Sentry: %s", e)

    try:
        await startup()
    except Exception:
        # Fatal: never serve traffic partially initialized
        logger.exception("Failed to initialize storage; exiting")
        await shutdown()
        raise

    logger.info("Complaint tracker ready (env=%s)", settings.environment)
    yield
    await shutdown()


app = FastAPI(
    title="Complaint Tracker",
    description="Citizen complaint submission, triage and audit trail API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(ReadinessGateMiddleware, lifecycle=lifecycle)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ComplaintTrackerError)
async def service_error_handler(request: Request, exc: ComplaintTrackerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == 404 and detail == "Not Found":
        detail = "Route not found"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(health_router)
app.include_router(api_router, prefix="/api")
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
