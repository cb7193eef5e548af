"""Error Handlers - every failure leaves the API as {"error": {...}}.

Invariants:
    - ShopLedgerError → its own http_status and to_response() body
    - Request validation → 400 VALIDATION_ERROR; message is the first problem,
      details list every field (without the "body"/"query" prefix)
    - Anything else → 500 INTERNAL_ERROR with no internals in the body
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shopledger.core.errors import ErrorSeverity, ShopLedgerError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path"}


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ShopLedgerError)
    async def shop_ledger_error_handler(request: Request, exc: ShopLedgerError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{exc.code}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "order_id": exc.context.order_id,
                "account_id": exc.context.account_id,
                "transaction_id": exc.context.transaction_id,
            },
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [_field_problem(e) for e in exc.errors()]
        logger.warning(
            f"Rejected request: {details}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=validation_error_body(details),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _field_problem(error: dict) -> dict:
    loc = [str(part) for part in error.get("loc", ())]
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    message = error.get("msg", "Invalid value")
    # pydantic prefixes custom validator messages
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return {"field": ".".join(loc) or None, "message": message, "type": error.get("type")}


def validation_error_body(details: list[dict]) -> dict:
    """Error body shaped like ShopLedgerError.to_response() for request validation."""
    first = details[0]["message"] if details else "Invalid request data"
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": first,
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": details,
        },
    }
