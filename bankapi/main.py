"""
Bank API Service

A FastAPI-based service for managing bank accounts. Clients can create,
list, fetch and delete accounts, log in with an account number and
password to obtain a signed token, and use that token to read their own
account.

Access control:
---------------
``GET /account/{id}`` is the only protected route. The token presented in
the ``x-jwt-token`` header asserts an account *number*; the path carries a
storage *identifier*. The authorization gate loads the account behind the
identifier and lets the request through only when the two agree, so a
logged-in caller can never read somebody else's account by guessing ids.

Run with ``python -m bankapi.main`` (JWT_SECRET must be set).
"""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from bankapi import metrics
from bankapi.api import router
from bankapi.auth import AuthorizationGate, TokenIssuer
from bankapi.config import Settings, settings as default_settings
from bankapi.database import Base, build_engine, build_session_factory
from bankapi.errors import ApiError, ClientInputError, ConfigurationError, InternalError
from bankapi.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
    generate_request_id,
)
from bankapi.services import AccountService
from bankapi.storage import AccountStore, InMemoryAccountStore, SqlAlchemyAccountStore

# Configure structured logging
configure_logging()
logger = get_logger(__name__)

MEMORY_DATABASE_URL = "memory://"


def error_response(status_code: int, message: str, request: Request) -> JSONResponse:
    """Build the ``{"error": ...}`` envelope used by every failure."""
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def endpoint_label(request: Request) -> str:
    """Route template for metric labels; unmatched paths share one label."""
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[AccountStore] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Settings to use (defaults to the environment)
        store: Account store; built from ``database_url`` when omitted

    Raises:
        ConfigurationError: If no token secret is configured
    """
    app_settings = app_settings or default_settings
    if not app_settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not set")

    engine = None
    if store is None:
        if app_settings.database_url == MEMORY_DATABASE_URL:
            store = InMemoryAccountStore()
        else:
            engine = build_engine(app_settings.database_url)
            store = SqlAlchemyAccountStore(build_session_factory(engine))

    issuer = TokenIssuer(
        app_settings.jwt_secret,
        ttl_seconds=app_settings.token_ttl_seconds,
        algorithm=app_settings.jwt_algorithm,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(
            "service_starting",
            service_name=app_settings.service_name,
            store=type(store).__name__,
        )

        # Create tables if they don't exist (in production, use migrations)
        if engine is not None:
            Base.metadata.create_all(bind=engine)

        logger.info("service_started", service_name=app_settings.service_name)

        yield

        logger.info("service_stopping", service_name=app_settings.service_name)
        if engine is not None:
            engine.dispose()

    app = FastAPI(
        title="Bank API",
        description="Accounts, login tokens and owner-only account access",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store
    app.state.token_issuer = issuer
    app.state.account_service = AccountService(
        store, issuer, password_rounds=app_settings.bcrypt_rounds
    )
    app.state.authorization_gate = AuthorizationGate(store, issuer)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """
        Middleware for request tracing, logging, and metrics.

        Sets up request context with:
        - request_id: Unique identifier for tracing
        - Timing for duration_ms calculation
        - Prometheus metrics collection
        """
        method = request.method
        path = request.url.path

        # Skip logging/metrics for health and metrics endpoints
        if path in ("/health", "/metrics"):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_context(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()

        logger.info("request_received", method=method, path=path)

        try:
            response = await call_next(request)

            duration_seconds = time.perf_counter() - start_time
            endpoint = endpoint_label(request)

            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_seconds * 1000, 2),
            )

            metrics.record_request(method, endpoint, response.status_code, duration_seconds)

            response.headers["X-Request-ID"] = request_id

            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.error(
                "request_failed",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )

            metrics.HTTP_REQUESTS.labels(
                method=method, endpoint=endpoint_label(request), status=500
            ).inc()

            raise

        finally:
            clear_request_context()

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        """Map the error taxonomy onto status codes and the error envelope."""
        if exc.status_code >= 500:
            logger.error("api_error", status_code=exc.status_code, error_type=type(exc).__name__, detail=exc.detail)
        else:
            logger.info("api_error", status_code=exc.status_code, error_type=type(exc).__name__)
        return error_response(exc.status_code, exc.message, request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Malformed or invalid JSON bodies are client input errors."""
        logger.info("request_validation_failed", error_count=len(exc.errors()))
        return error_response(ClientInputError.status_code, ClientInputError.message, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail).lower(), request)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Anything outside the taxonomy is an internal error."""
        logger.error("unhandled_error", error_type=type(exc).__name__, exc_info=exc)
        return error_response(InternalError.status_code, InternalError.message, request)

    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {"status": "ok", "service": app_settings.service_name}

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bankapi.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
    )
