from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
import traceback
from flashdeck.core.config import settings
from flashdeck.core.database import init_db
from flashdeck.core.exceptions import (
    FlashdeckException,
    AuthenticationError,
    InvalidInputError,
    NotFoundOrDeniedError,
    QuotaExceededError,
    EntitlementRequiredError,
    DescriptionRequiredError,
    GenerationFailedError,
    OperationTimeoutError,
)

# Import models to register them with SQLModel
from flashdeck import models  # noqa: F401

# Import API router
from flashdeck.api.v1 import api_router

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=settings.log_level.upper()
)
logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (DescriptionRequiredError, status.HTTP_400_BAD_REQUEST),
    (NotFoundOrDeniedError, status.HTTP_404_NOT_FOUND),
    (QuotaExceededError, status.HTTP_402_PAYMENT_REQUIRED),
    (EntitlementRequiredError, status.HTTP_403_FORBIDDEN),
    (GenerationFailedError, status.HTTP_502_BAD_GATEWAY),
    (OperationTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
]

app = FastAPI(title="Flashdeck API", version="1.0.0")


# Add exception handler for validation errors to log details
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors and report the first offending field."""
    errors = exc.errors()
    logger.error(f"Validation error on {request.method} {request.url.path}")
    logger.error(f"Validation errors: {errors}")
    first_error = errors[0] if errors else {}
    # Drop the leading 'body'/'query'/'path' location marker
    loc = [str(part) for part in first_error.get("loc", ())][1:]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": first_error.get("msg", "Invalid input"),
            "type": InvalidInputError.kind,
            "field": ".".join(loc) or None,
        },
    )


# Add exception handler for custom application exceptions
@app.exception_handler(FlashdeckException)
async def flashdeck_exception_handler(request: Request, exc: FlashdeckException):
    """Handle custom application exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for exception_type, mapped_status in STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_type):
            status_code = mapped_status
            break

    logger.warning(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    content = {"detail": str(exc), "type": exc.kind}
    if isinstance(exc, InvalidInputError) and exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=status_code, content=content)


# Add global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions to prevent 502 errors."""
    # Log full traceback
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

    # In development, show full error details
    if settings.is_development:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
                "traceback": traceback.format_exc()
            },
        )
    # In production, return generic message
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An internal server error occurred. Please try again later.",
            "type": "InternalServerError"
        },
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    init_db()


@app.get("/")
async def root():
    return {
        "message": "Flashdeck API",
        "status": "running",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


# Include API router
app.include_router(api_router, prefix=settings.api_v1_prefix)
