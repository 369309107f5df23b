"""
main.py — Steel Marketplace API

Application entry point: lifespan (logging, database connect/close),
request middleware, error handlers and router mounts. Route handlers live
in app/routers/, business logic in app/services/.

Business Rules:
- Every response carries X-Request-ID, X-API-Version and OWASP headers
- Every error is {error, status_code, request_id}; internals never leak
- Request validation failures are 400, not FastAPI's default 422
- The database handle is built here and parked on app.state.database

Called by: uvicorn (app.main:app)
Depends on: config, database, logging_config, routers/*
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import APP_VERSION, settings
from .database import Database
from .exceptions import MarketplaceError
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import accounts, auth, catalog, quotes
from .schemas.errors import ErrorResponse
from .startup import run_startup_migrations


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    database = Database(settings.database_url)
    database.connect()
    run_startup_migrations(database)
    app.state.database = database
    logger.info("Steel marketplace v{} started", APP_VERSION)
    try:
        yield
    finally:
        database.close()
        app.state.database = None


app = FastAPI(title="Steel Marketplace", version=APP_VERSION, lifespan=lifespan)
app.state.limiter = limiter


# ── Middleware ───────────────────────────────────────────────────────


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
    response.headers["X-Request-ID"] = request_id
    response.headers["X-API-Version"] = "v1"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# ── Error handlers ───────────────────────────────────────────────────


def _error(request: Request, status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(
        error=message,
        status_code=status_code,
        request_id=getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
    return _error(request, exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(request, 400, message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(request, exc.status_code, str(exc.detail))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return _error(request, 429, f"Rate limit exceeded: {exc.detail}")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.opt(exception=exc).error("Database error on {} {}", request.method, request.url.path)
    return _error(request, 500, "Internal server error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return _error(request, 500, "Internal server error")


# ── Housekeeping ─────────────────────────────────────────────────────


@app.get("/health")
def health(request: Request):
    database = getattr(request.app.state, "database", None)
    connected = bool(database and database.ping())
    body = {
        "ok": connected,
        "status": "ok" if connected else "degraded",
        "database": "connected" if connected else "disconnected",
        "version": APP_VERSION,
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)


@app.get("/api/ping", response_class=PlainTextResponse)
def ping():
    return "pong"


app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(catalog.router)
app.include_router(quotes.router)
