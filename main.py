import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import all models so Base.metadata knows every table
import models  # noqa: F401

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from core.config import Settings, get_settings
from core.context import AppContext
from core.database import Base
from core.errors import AppError
from core.logging_config import setup_logging
from middleware import RequestIDMiddleware, get_request_id, limiter
from routers import auth, users, businesses, attractions
from utils.logger import get_logger, log_request, sanitize_log_data

logger = get_logger(__name__)


def _validation_errors(exc: RequestValidationError) -> dict:
    errors = {}
    for error in exc.errors():
        fields = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(fields) or "body"
        errors.setdefault(field, error.get("msg", "invalid value"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        extra = {
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_code": exc.code,
            "request_id": get_request_id(request)
        }

        if exc.status_code >= 500:
            logger.error(f"Request failed: {exc}", extra=extra, exc_info=exc)
        else:
            logger.warning(f"Request rejected: {exc.message}", extra=extra)

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.code}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        body = exc.body if isinstance(exc.body, dict) else {}
        errors = _validation_errors(exc)

        logger.warning(
            "Request validation failed",
            extra={
                "path": request.url.path,
                "errors": errors,
                "body": sanitize_log_data(body)
            }
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "validation error", "errors": errors}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch all unhandled exceptions and log them with a stack trace.
        The client only sees a generic message.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_type": type(exc).__name__,
                "request_id": get_request_id(request)
            },
            exc_info=exc
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"}
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its context.

    Run with: uvicorn main:create_app --factory
    """
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR
    )

    context = AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=context.engine)
        logger.info("Application startup complete", extra={"event": "startup"})
        yield
        context.close()
        logger.info("Application shutting down", extra={"event": "shutdown"})

    app = FastAPI(
        title=settings.APP_NAME,
        description="Authentication and session backend for the Nusa tourism platform",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,  # refresh token travels as a cookie
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)
        user_id = getattr(request.state, "user_id", None)

        log_request(
            logger,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            client_ip=request.client.host if request.client else None,
            user_id=str(user_id) if user_id else None
        )

        return response

    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    async def health_check():
        logger.debug("Health check requested")
        return {"status": "Healthy"}

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(businesses.router)
    app.include_router(attractions.router)

    # Rate limiting stays off under test
    limiter.enabled = settings.ENV != "testing"
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    return app
