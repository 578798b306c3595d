import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .friendly_msg import DEFAULT_MESSAGE

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            trace_id = request.headers.get("X-Request-ID", "none")
            logger.exception(
                f"Unhandled server error TraceID={trace_id} | "
                f"{request.method} {request.url.path}: {e}"
            )
            return JSONResponse({"detail": DEFAULT_MESSAGE}, status_code=500)
