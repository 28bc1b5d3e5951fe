from contextlib import asynccontextmanager
import logging
import math
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from filemyrti_api.core.config import get_settings
from filemyrti_api.core.responses import send_error, send_response
from filemyrti_api.database import init_db
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.services.payment_gateway import RazorpayGateway

from filemyrti_api.routes.auth import router as auth_router
from filemyrti_api.routes.users import router as users_router
from filemyrti_api.routes.services import router as services_router
from filemyrti_api.routes.states import router as states_router
from filemyrti_api.routes.rti_applications import router as rti_applications_router
from filemyrti_api.routes.payment import router as payment_router
from filemyrti_api.routes.payment_recoveries import router as payment_recoveries_router
from filemyrti_api.routes.consultations import router as consultations_router
from filemyrti_api.routes.callback_requests import router as callback_requests_router
from filemyrti_api.routes.newsletter import router as newsletter_router
from filemyrti_api.routes.contact import router as contact_router
from filemyrti_api.routes.careers import router as careers_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)
logger = logging.getLogger("filemyrti_api")

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to start without gateway credentials or a usable JWT secret
    settings.validate()

    # Create tables (models are imported inside init_db)
    init_db()

    app.state.payment_gateway = RazorpayGateway.from_settings(settings)
    app.state.notifier = NotificationDispatcher.from_settings(settings)
    await app.state.notifier.start()
    logger.info(f"{settings.app_name} started ({settings.environment})")
    try:
        yield
    finally:
        await app.state.notifier.stop()
        logger.info(f"{settings.app_name} stopped")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    if not request.url.path.startswith("/api"):
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = send_error(str(exc.detail), exc.status_code)
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response


def _json_safe(value):
    # NaN and Infinity are accepted by the JSON parser but cannot be rendered back
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({
            "field": ".".join(location),
            "message": message,
            "value": _json_safe(error.get("input"))
        })
    return send_error("Validation failed", status.HTTP_400_BAD_REQUEST, errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    errors = None if settings.is_production else [{"message": str(exc)}]
    return send_response(status.HTTP_500_INTERNAL_SERVER_ERROR, False, "Internal server error", errors=errors)


app.include_router(auth_router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
app.include_router(users_router, prefix=f"{API_PREFIX}/users", tags=["users"])
app.include_router(services_router, prefix=f"{API_PREFIX}/services", tags=["services"])
app.include_router(states_router, prefix=f"{API_PREFIX}/states", tags=["states"])
app.include_router(rti_applications_router, prefix=f"{API_PREFIX}/rti-applications", tags=["rti-applications"])
app.include_router(payment_router, prefix=f"{API_PREFIX}/payments", tags=["payments"])
app.include_router(payment_recoveries_router, prefix=f"{API_PREFIX}/payment-recoveries", tags=["payment-recoveries"])
app.include_router(consultations_router, prefix=f"{API_PREFIX}/consultations", tags=["consultations"])
app.include_router(callback_requests_router, prefix=f"{API_PREFIX}/callback-requests", tags=["callback-requests"])
app.include_router(newsletter_router, prefix=f"{API_PREFIX}/newsletter", tags=["newsletter"])
app.include_router(contact_router, prefix=f"{API_PREFIX}/contact", tags=["contact"])
app.include_router(careers_router, prefix=f"{API_PREFIX}/careers", tags=["careers"])


@app.get("/health")
def health_check():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
