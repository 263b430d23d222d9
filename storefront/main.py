from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.v1.routes import router as v1_router
from storefront.core.config import settings
from storefront.core.errors import RestrictionError, ValidationError
from storefront.core.logging import configure_logging, logger
from storefront.middlewares.request_id import RequestIdMiddleware

configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-Id"],
    expose_headers=["X-Request-Id"],
)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_failed",
            "message": str(exc),
            "errors": exc.errors,
            "requestId": _request_id(request),
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Same body as a rejected record: field name to messages.
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        errors.setdefault(".".join(loc) or "request", []).append(error["msg"])
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_failed",
            "message": str(ValidationError(errors)),
            "errors": errors,
            "requestId": _request_id(request),
        },
    )


@app.exception_handler(RestrictionError)
async def restriction_error_handler(request: Request, exc: RestrictionError):
    return JSONResponse(
        status_code=409,
        content={
            "error": "restricted",
            "message": str(exc),
            "requestId": _request_id(request),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Internal details stay in the log, not in the response.
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"requestId": request_id})
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "Unexpected error",
            "requestId": request_id,
        },
    )


@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "version": settings.app_version,
    }


app.include_router(v1_router)

logger.info(
    "%s started",
    settings.app_name,
    extra={"env": settings.environment, "corsOrigins": settings.cors_origins_list()},
)
