"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Wires the ledger store, clock and notifier onto app.state
- Registers API routes and exception handlers
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.store import InMemoryLedgerStore
from app.services.notification_service import build_notifier
from app.api import auth, dashboard, ledger, vehicles
from utils.time_utils import Clock

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting FleetLedger application...")

    try:
        validate_settings()
        logger.info("Configuration validated")

        if settings.STORE_BACKEND == "mongo":
            from app.db.mongo import connect_to_mongo, get_database, MongoLedgerStore
            from app.db.indexes import create_indexes

            await connect_to_mongo()
            await create_indexes(get_database())
            app.state.store = MongoLedgerStore(get_database())
            logger.info("MongoDB ledger store ready")
        else:
            logger.info("Using in-memory ledger store (data is lost on restart)")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Debug Mode: {settings.DEBUG}")
        if settings.EXPOSE_OTP_IN_RESPONSE:
            logger.warning("EXPOSE_OTP_IN_RESPONSE is enabled: OTPs are returned to API callers")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("Shutting down FleetLedger application...")

    if settings.STORE_BACKEND == "mongo":
        from app.db.mongo import close_mongo_connection
        await close_mongo_connection()


app = FastAPI(
    title="FleetLedger",
    description="Fleet income/expense ledger with compliance alerts and OTP signup",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

# Default collaborators; lifespan swaps the store for MongoDB when configured
app.state.store = InMemoryLedgerStore()
app.state.clock = Clock(settings.TIMEZONE)
app.state.notifier = build_notifier()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["Auth"])
app.include_router(vehicles.router, prefix=settings.API_PREFIX, tags=["Vehicles"])
app.include_router(ledger.router, prefix=settings.API_PREFIX, tags=["Ledger"])
app.include_router(dashboard.router, prefix=settings.API_PREFIX, tags=["Dashboard"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "FleetLedger API",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint.
    Reports store connectivity.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {"store": settings.STORE_BACKEND}
    }

    try:
        store_healthy = await request.app.state.store.ping()
    except Exception as e:
        logger.error(f"Store health check failed: {str(e)}")
        store_healthy = False

    if not store_healthy:
        health_status["status"] = "unhealthy"
        health_status["checks"]["store"] = "unhealthy"

    status_code = 200 if store_healthy else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if await request.app.state.store.ping():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "store_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
