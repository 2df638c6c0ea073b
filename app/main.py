"""Portfolio Intelligence API - backend-for-frontend over the Intelligence API."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.config import get_settings
from app.core.errors import IntelligenceError
from app.core.observability import setup_logging
from app.database import init_db
from app.api.v1.router import router as api_v1_router
from app.services.intelligence.proxy import build_intelligence_proxy

logger = logging.getLogger(__name__)

settings = get_settings()

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    setup_logging(settings.log_level, settings.log_format)
    if settings.is_development:
        await init_db()  # Only auto-create tables in dev
    app.state.intelligence = build_intelligence_proxy(settings)
    logger.info(
        f"{settings.app_name} started "
        f"(intelligence_enabled={settings.intelligence_enabled})"
    )
    yield
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    description="Portfolio-aware proxy for the Intelligence API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,  # Disable docs in production
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS - strict in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["X-Data-Source", "X-Data-Stale", "X-Data-Fallback"],
    max_age=600,  # Cache preflight for 10 minutes
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    if settings.is_production:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log requests in development."""
    if settings.is_development:
        logger.debug(f"[{request.method}] {request.url.path}")
    return await call_next(request)


@app.exception_handler(IntelligenceError)
async def intelligence_error_handler(request: Request, exc: IntelligenceError):
    """Render proxy errors as {"error": {"code", "message"}}."""
    logger.error(
        f"IntelligenceError: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid path/query parameters are a 400, not a 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request parameters",
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                    }
                    for e in exc.errors()
                ],
            },
        },
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all - never leaks internal details."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
    )


# Include API routes
app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "healthy",
        "environment": settings.environment.value,
        "intelligence_enabled": settings.intelligence_enabled,
    }
