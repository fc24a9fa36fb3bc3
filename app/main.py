import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import appointments, auth, availability, catalog, email
from app.core.config import settings, _ENV_FILE

if os.getenv("ENV") != "production":
    logging.basicConfig(level=logging.DEBUG)
else:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
    )
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Loading .env from: %s (exists: %s)", _ENV_FILE, _ENV_FILE.exists())
    if settings.email_enabled:
        logger.info("Email: SMTP configured (%s:%d)", settings.smtp_host, settings.smtp_port)
    else:
        logger.warning("Email: NOT configured. Set SMTP_HOST, SMTP_USER, SMTP_PASSWORD and FROM_EMAIL in %s", _ENV_FILE)
    if not settings.admin_emails_list:
        logger.warning("No ADMIN_EMAILS configured; admin endpoints will reject every user")
    yield


app = FastAPI(
    title="NXL Beauty Bar API",
    description="Booking backend: users, appointments, services, employees, payments, availability",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

API_PREFIX = "/api/v1"

for router in (
    auth.router,
    auth.users_router,
    appointments.router,
    availability.router,
    catalog.services_router,
    catalog.employees_router,
    catalog.payments_router,
    email.router,
):
    app.include_router(router, prefix=API_PREFIX)


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Add CORS headers to error responses so the browser doesn't block them."""
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Authorization, Content-Type",
    }
    if origin and origin in settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = origin
    elif settings.cors_origins_list:
        headers["Access-Control-Allow-Origin"] = settings.cors_origins_list[0]
    return headers


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """JSON error body with CORS headers, so the booking site can read 500s too."""
    origin = request.headers.get("origin")
    headers = _cors_headers(origin)
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers={**headers, **(exc.headers or {})},
        )
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # Tracebacks stay in the log; clients only see the exception type outside development
    if settings.env == "development":
        detail = f"{type(exc).__name__}: {exc}"
    else:
        detail = f"Internal server error ({type(exc).__name__})"
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
        headers=headers,
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get(f"{API_PREFIX}/ping")
async def ping() -> dict:
    return {"message": "Backend Running"}
