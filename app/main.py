import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.api.router import api_router
from app.config import settings
from app.database import init_db, close_db
from app.core.exceptions import (
    FormNotFoundException,
    FormNotAvailableException,
    PermissionDeniedException,
    NotAuthenticatedException,
    InvalidCredentialsException,
    PersistenceException,
    SettingsStorageException,
)
from app.core.logging_config import setup_logging, cleanup_old_logs
from app.core.logging_utils import sanitize_log_message, get_request_id
from app.middleware.logging_middleware import LoggingMiddleware
from app.middleware.rate_limit import setup_rate_limiting
from app.ui.router import router as ui_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)


@app.on_event("startup")
async def startup_event():
    """Configure logging and create the database schema."""
    setup_logging()
    cleanup_old_logs()
    await init_db()
    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Release pooled database connections."""
    await close_db()
    logger.info("Application shutdown complete")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID", "Accept", "Origin"],
)

if settings.LOG_ENABLE_REQUEST_LOGGING:
    app.add_middleware(LoggingMiddleware)

setup_rate_limiting(app)

app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(ui_router)


def error_response(exc: StarletteHTTPException) -> JSONResponse:
    """Error envelope shared by every handler: {"error": <detail>}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _client_ip(request: Request):
    return request.client.host if request.client else None


@app.exception_handler(FormNotFoundException)
async def form_not_found_handler(request: Request, exc: FormNotFoundException):
    logger.warning(
        sanitize_log_message(
            "Form not found",
            RequestID=get_request_id(request),
            Path=request.url.path,
            Method=request.method,
            IP=_client_ip(request)
        )
    )
    return error_response(exc)


@app.exception_handler(FormNotAvailableException)
async def form_not_available_handler(request: Request, exc: FormNotAvailableException):
    logger.warning(
        sanitize_log_message(
            "Unpublished form requested",
            RequestID=get_request_id(request),
            Path=request.url.path,
            IP=_client_ip(request)
        )
    )
    return error_response(exc)


@app.exception_handler(PermissionDeniedException)
async def permission_denied_handler(request: Request, exc: PermissionDeniedException):
    logger.warning(
        sanitize_log_message(
            "Permission denied",
            RequestID=get_request_id(request),
            Path=request.url.path,
            Method=request.method,
            IP=_client_ip(request),
            Detail=exc.detail
        )
    )
    return error_response(exc)


@app.exception_handler(NotAuthenticatedException)
@app.exception_handler(InvalidCredentialsException)
async def authentication_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        sanitize_log_message(
            "Authentication failed",
            RequestID=get_request_id(request),
            Path=request.url.path,
            IP=_client_ip(request),
            Detail=exc.detail
        )
    )
    return error_response(exc)


@app.exception_handler(PersistenceException)
async def persistence_handler(request: Request, exc: PersistenceException):
    # Underlying error already logged with traceback by the service
    logger.error(
        sanitize_log_message(
            "Database error",
            RequestID=get_request_id(request),
            Path=request.url.path,
            Method=request.method
        )
    )
    return error_response(exc)


@app.exception_handler(SettingsStorageException)
async def settings_storage_handler(request: Request, exc: SettingsStorageException):
    logger.error(
        sanitize_log_message(
            "Settings storage error",
            RequestID=get_request_id(request),
            Path=request.url.path
        )
    )
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors(), exclude={"input", "url", "ctx"})
    logger.warning(
        sanitize_log_message(
            "Invalid request body",
            RequestID=get_request_id(request),
            Path=request.url.path,
            Method=request.method,
            Errors=[e.get("msg") for e in errors]
        )
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": errors}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(
        sanitize_log_message(
            f"Unhandled exception: {type(exc).__name__}",
            RequestID=get_request_id(request),
            Path=request.url.path,
            Method=request.method,
            IP=_client_ip(request),
            ExceptionMessage=str(exc)
        )
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}
