import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .settings import settings

logger = logging.getLogger(__name__)

AUTH_ERROR_MARKERS = (
    "row-level security",
    "permission denied",
    "jwt expired",
    "invalid token",
)

AUTH_COOKIES = ("access_token", "session")


class ForcedLogoutError(Exception):
    """The backend rejected the caller's identity; the session must end."""

    def __init__(self, reason: str = "Session is no longer valid"):
        super().__init__(reason)
        self.reason = reason


def is_authorization_error(error: BaseException) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in AUTH_ERROR_MARKERS)


def logout_response(detail: str) -> JSONResponse:
    response = JSONResponse(
        {"detail": detail, "action": "sign_in", "redirect": "/signin"},
        status_code=401,
    )
    for cookie in AUTH_COOKIES:
        response.delete_cookie(
            key=cookie,
            path="/",
            httponly=True,
            samesite="lax",
            secure=settings.SECURE_COOKIES,
        )
    return response


class ForcedLogoutHandler:
    async def __call__(self, request: Request, exc: ForcedLogoutError):
        logger.warning(
            f"Forcing sign-out on {request.url.path}: {exc.reason}"
        )
        return logout_response("Access denied. Please sign in again.")
