import logging
import time
import uuid
from datetime import datetime, timezone

import redis
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from api.v1.distance_route import router as v1_distance_route_router
from api.v1.price_route import router as v1_price_route_router
from core.errors import ErrorCode, PricingError
from core.redis_cache import get_cache_db
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    error_response,
    http_exception_response,
    pricing_error_response,
    request_id_from,
)
from core.settings import get_settings
from core.validation_errors import format_validation_error_details

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Process-Time"] = f"{time.perf_counter() - start_time:.4f}"
        return response


app = FastAPI(title="Cleaning Price API")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins) if settings.cors_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return http_exception_response(exc=exc, request=request)


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
    details = format_validation_error_details(exc.errors())
    return error_response(
        status_code=422,
        message=details["summary"],
        data={"code": ErrorCode.VALIDATION_FAILED.value, "details": details},
        request_id=request_id_from(request),
    )


@app.exception_handler(PricingError)
async def custom_pricing_exception_handler(request: Request, exc: PricingError):
    logger.info("Rejected price request on %s: %s (%s)", request.url.path, exc.message, exc.field)
    return pricing_error_response(exc, request)


@app.exception_handler(Exception)
async def custom_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    details = str(exc) if (settings.debug_include_error_details and not settings.is_production) else None
    return error_response(
        status_code=500,
        message="Internal Server Error",
        data={"code": ErrorCode.INTERNAL_ERROR.value, "details": details},
        request_id=request_id_from(request),
    )


@app.get("/", tags=["Health"], include_in_schema=False)
@document_response(message="Successfully fetched data", success_example={"message": "Cleaning Price API"})
def read_root(request: Request):
    return {"message": "Cleaning Price API", "request_id": request_id_from(request)}


@app.get("/health", tags=["Health"])
@document_response(
    message="Health check completed",
    success_example={"status": "healthy", "services": {"redis": {"status": "disabled"}}},
)
async def health_check():
    services: dict[str, dict[str, str | float]] = {}
    overall_status = "healthy"

    cache_db = get_cache_db()
    if cache_db is None:
        services["redis"] = {"status": "disabled", "message": "REDIS_URL not configured"}
    else:
        start = time.perf_counter()
        try:
            cache_db.ping()
            services["redis"] = {
                "status": "healthy",
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                "message": "Redis ping successful",
            }
        except redis.RedisError as exc:
            # The geocode cache is optional; pricing keeps working without it.
            overall_status = "degraded"
            services["redis"] = {
                "status": "unhealthy",
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                "message": str(exc),
            }

    return {
        "status": overall_status,
        "environment": settings.env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }


app.include_router(v1_price_route_router, prefix="/v1")
app.include_router(v1_distance_route_router, prefix="/v1")

apply_response_documentation(app)
