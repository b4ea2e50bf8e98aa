import re as _re
import time as _time
import uuid as _uuid
from contextlib import asynccontextmanager

import httpx
import sentry_sdk
import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from workshop_web.api.client import create_http_client
from workshop_web.auth.cookies import clear_session_cookie
from workshop_web.auth.routes import router as auth_router
from workshop_web.bookings.routes import router as bookings_router
from workshop_web.catalog.routes import router as services_router
from workshop_web.config import settings
from workshop_web.dashboard.routes import router as dashboard_router
from workshop_web.dependencies import LoginRequired, get_http_client
from workshop_web.middleware import SecurityHeadersMiddleware
from workshop_web.templating import STATIC_DIR
from workshop_web.users.routes import router as users_router
from workshop_web.vehicles.routes import router as vehicles_router
from workshop_web.work_orders.routes import router as work_orders_router

# Configure structlog: JSON in production, console in development
processors = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]
if settings.is_production:
    processors.append(structlog.processors.JSONRenderer())
else:
    processors.append(structlog.dev.ConsoleRenderer())

structlog.configure(
    processors=processors,
    wrapper_class=structlog.make_filtering_bound_logger(10 if settings.APP_DEBUG else 20),
)

logger = structlog.get_logger()

# Sentry error tracking
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.1,
        environment=settings.APP_ENV,
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("workshop_web_startup", env=settings.APP_ENV, api_base_url=settings.API_BASE_URL)
    app.state.http_client = create_http_client()
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info("workshop_web_shutdown")


app = FastAPI(
    title="Workshop Console",
    description="Browser console for the vehicle workshop management API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    response = RedirectResponse("/login", status_code=303)
    if exc.clear_cookie:
        clear_session_cookie(response)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions and return a safe 500 response outside development."""
    logger.exception("unhandled_exception", path=request.url.path)
    if settings.APP_ENV != "development":
        return PlainTextResponse("Internal server error", status_code=500)
    # In development, re-raise so the default handler shows the traceback
    raise exc


# Security headers applied in all environments; HSTS only in production
app.add_middleware(SecurityHeadersMiddleware, is_production=settings.is_production)


_REQUEST_ID_RE = _re.compile(r"^[a-zA-Z0-9\-]{1,64}$")


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Attach a unique request ID and measure duration for every request."""
    # Validate X-Request-ID to prevent log injection
    client_id = request.headers.get("X-Request-ID")
    request_id = client_id if client_id and _REQUEST_ID_RE.match(client_id) else str(_uuid.uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id)
    start = _time.monotonic()
    try:
        response = await call_next(request)
        duration_ms = (_time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{duration_ms:.1f}ms"
        # Pages wait on the backend, so a slow page usually means a slow API
        if duration_ms > 1000:
            logger.warning(
                "slow_request",
                method=request.method,
                path=request.url.path,
                duration_ms=round(duration_ms, 1),
                status_code=response.status_code,
            )
        return response
    finally:
        structlog.contextvars.clear_contextvars()


app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(auth_router, tags=["auth"])
app.include_router(dashboard_router, tags=["dashboard"])
app.include_router(bookings_router, prefix="/bookings", tags=["bookings"])
app.include_router(vehicles_router, prefix="/vehicles", tags=["vehicles"])
app.include_router(services_router, prefix="/services", tags=["services"])
app.include_router(users_router, prefix="/users", tags=["users"])
app.include_router(work_orders_router, prefix="/work-orders", tags=["work-orders"])


@app.get("/health")
async def health_check(http: httpx.AsyncClient = Depends(get_http_client)):
    """Console liveness plus reachability of the workshop API."""
    try:
        response = await http.get(settings.API_HEALTHCHECK_URL, timeout=5.0)
    except httpx.HTTPError as exc:
        logger.warning("backend_healthcheck_failed", error=str(exc))
        return JSONResponse(status_code=503, content={"status": "unhealthy", "backend": "unreachable"})

    if not response.is_success:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "backend": "error", "backend_status": response.status_code},
        )
    return {"status": "ok", "backend": "ok"}
