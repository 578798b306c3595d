from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# "body", "query" and "path" prefixes carry no meaning for the client form.
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def field_name(loc) -> str:
    parts = [str(p) for p in (loc or ()) if p not in _LOCATION_ROOTS]
    return ".".join(parts) or "__root__"


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": field_name(err.get("loc")),
                "loc": err.get("loc"),
                "msg": str(err.get("msg")).removeprefix("Value error, "),
                "type": err.get("type"),
            }
            for err in exc.errors()
        ]

        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Validation failed",
                "details": errors,
            },
        )
