"""FastAPI application entry point."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tableside import __version__
from tableside.api.routes import api_router
from tableside.core.config import settings
from tableside.core.exceptions import TablesideError
from tableside.core.rate_limit import limiter
from tableside.db.base import Base
from tableside.db.session import SessionLocal, engine
from tableside.realtime import publish, ws_manager
from tableside.schemas.requests import ServiceRequestResponse

# Configure logging - use JSON format in production, human-readable in dev
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, settings.log_level))
root_logger.handlers.clear()

if settings.debug:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
else:
    import json as _json
    import sys

    class JSONFormatter(logging.Formatter):
        def format(self, record):
            return _json.dumps({
                "ts": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "module": record.module,
                "line": record.lineno,
            })

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

root_logger.addHandler(handler)
logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        # Skip logging for health checks
        if request.url.path in ["/health", "/health/ready", "/"]:
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            raise

        process_time = time.time() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        request_logger.log(
            log_level,
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.3f}s - Client: {client_ip}"
        )
        return response


async def _periodic_service_request_expiry():
    """Close unanswered service requests; replaces the customer-side countdown."""
    from tableside.services.service_request_service import run_service_request_expiry

    while True:
        try:
            await asyncio.sleep(settings.expiry_sweep_interval_seconds)
            expired = run_service_request_expiry()
            for request in expired:
                await publish("service-requests", "completed", ServiceRequestResponse.model_validate(request))
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.warning(f"Service request expiry sweep error: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting Tableside ({'database' if settings.use_database else 'in-memory'} store)")

    # Create tables if they don't exist; production schemas go through Alembic
    if settings.use_database:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")

    expiry_task = asyncio.create_task(_periodic_service_request_expiry())
    logger.info(
        f"Service request expiry started (every {settings.expiry_sweep_interval_seconds}s, "
        f"timeout {settings.service_request_timeout_seconds}s)"
    )

    yield

    expiry_task.cancel()
    try:
        await expiry_task
    except asyncio.CancelledError:
        pass

    logger.info("Shutting down Tableside")


app = FastAPI(
    title="Tableside",
    description="QR ordering, table and service-request API for restaurant front of house",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Rate limiting setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ===== Error responses: {"error": ..., "code": ...} =====

@app.exception_handler(TablesideError)
async def tableside_error_handler(request: Request, exc: TablesideError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "code": exc.code})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = "NotFound" if exc.status_code == 404 else "HTTPError"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=422,
        content={"error": message, "code": "ValidationError"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "InternalError"})


# Security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware - added last so it runs first (Starlette LIFO order)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_origins_list != ["*"],
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    max_age=600,
)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
def health_check():
    """Basic liveness check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get(f"{settings.api_prefix}/health")
def api_health_check():
    return {"status": "healthy", "version": __version__, "store": "database" if settings.use_database else "memory"}


@app.get("/health/ready")
def readiness_check():
    """Readiness probe with store and WebSocket manager checks."""
    checks = {"store": "unknown", "websocket_manager": "unknown"}

    if settings.use_database:
        db = None
        try:
            db = SessionLocal()
            db.execute(text("SELECT 1"))
            checks["store"] = "healthy (database)"
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            checks["store"] = "unhealthy"
        finally:
            if db:
                db.close()
    else:
        checks["store"] = "healthy (memory)"

    checks["websocket_manager"] = f"healthy ({ws_manager.get_connection_count()} connections)"

    return {
        "status": "ready" if all(c.startswith("healthy") for c in checks.values()) else "degraded",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


@app.websocket("/ws/{channel}")
async def websocket_channel(websocket: WebSocket, channel: str):
    """Push updates for one collection; replies "pong" to "ping"."""
    if not await ws_manager.connect(websocket, channel):
        return

    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                ws_manager.update_ping(websocket)
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        ws_manager.disconnect(websocket, channel)
    except Exception as e:
        logger.error(f"WebSocket error in {channel}: {e}", exc_info=True)
        ws_manager.disconnect(websocket, channel)
