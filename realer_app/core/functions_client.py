import logging
from typing import Any

import httpx

from .settings import settings

logger = logging.getLogger(__name__)


class ExternalServiceError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class FunctionsClient:
    """HTTP client for the two serverless functions (email relay, blog generator)."""

    SEND_EMAIL_PATH = "/functions/v1/send-email"
    GENERATE_BLOG_PATH = "/functions/v1/generate-property-blog"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.FUNCTIONS_BASE_URL or "").rstrip("/")
        self.api_key = api_key if api_key is not None else settings.FUNCTIONS_API_KEY
        self.timeout = timeout or settings.FUNCTIONS_TIMEOUT
        self.transport = transport

    @property
    def headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    @staticmethod
    def validate_email_payload(payload: dict) -> str | None:
        if not payload.get("to") or not payload.get("subject"):
            return "Missing required fields: to, subject"
        if not payload.get("html") and not payload.get("text"):
            return "Either html or text content is required"
        return None

    async def send_email(self, payload: dict) -> dict[str, Any]:
        error = self.validate_email_payload(payload)
        if error:
            return {"success": False, "data": None, "error": error, "status": 400}

        body = {k: v for k, v in payload.items() if v is not None}
        if "from" not in body and settings.DEFAULT_EMAIL_SENDER:
            body["from"] = settings.DEFAULT_EMAIL_SENDER

        try:
            async with self._client() as client:
                res = await client.post(
                    self.SEND_EMAIL_PATH, json=body, headers=self.headers
                )
            try:
                data = res.json()
            except ValueError:
                data = {"raw": res.text}

            if res.status_code >= 400:
                message = (
                    data.get("error") if isinstance(data, dict) else None
                ) or "Failed to send email"
                logger.error("send-email failed (%s): %s", res.status_code, message)
                return {
                    "success": False,
                    "data": data,
                    "error": message,
                    "status": res.status_code,
                }

            return {"success": True, "data": data, "error": None, "status": res.status_code}

        except httpx.HTTPError as e:
            logger.error("Network error calling send-email", exc_info=e)
            return {
                "success": False,
                "data": None,
                "error": str(e) or "Unknown error sending email",
                "status": None,
            }

    async def generate_property_blog(self, property_data: dict) -> dict[str, str]:
        if not property_data:
            raise ExternalServiceError("Property data is required", status=400)

        try:
            async with self._client() as client:
                res = await client.post(
                    self.GENERATE_BLOG_PATH,
                    json={"property": property_data},
                    headers=self.headers,
                )
        except httpx.HTTPError as e:
            logger.error("Network error calling generate-property-blog", exc_info=e)
            raise ExternalServiceError(f"Blog generator unreachable: {e}") from e

        try:
            data = res.json()
        except ValueError:
            data = {}

        if res.status_code >= 400:
            message = data.get("error") or "Blog generation failed"
            logger.error(
                "generate-property-blog failed (%s): %s", res.status_code, message
            )
            raise ExternalServiceError(message, status=res.status_code)

        return {
            "title": data.get("title") or "Below Market Property Opportunity",
            "content": data.get("content") or "",
            "excerpt": data.get("excerpt") or "",
        }


functions_client = FunctionsClient()


def get_functions_client() -> FunctionsClient:
    return functions_client
