import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.logging_utils import mask_headers, sanitize_log_message

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, log each request/response and echo the ID as X-Request-ID."""

    SKIP_PATHS = ("/health", "/docs", "/redoc", "/openapi.json", "/static")

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        path = request.url.path
        if path.startswith(self.SKIP_PATHS):
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        method = request.method
        client_ip = request.client.host if request.client else None
        start_time = time.perf_counter()

        logger.debug(
            sanitize_log_message(
                f"Request: {method} {path}",
                RequestID=request_id,
                IP=client_ip,
                QueryParams=dict(request.query_params),
                Headers=mask_headers(dict(request.headers))
            )
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                sanitize_log_message(
                    f"Exception in request: {method} {path}",
                    RequestID=request_id,
                    ProcessTime=f"{time.perf_counter() - start_time:.3f}s",
                    IP=client_ip,
                    Error=str(e)
                )
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(
            sanitize_log_message(
                f"Response: {method} {path}",
                RequestID=request_id,
                Status=response.status_code,
                ProcessTime=f"{time.perf_counter() - start_time:.3f}s",
                IP=client_ip
            )
        )
        return response
