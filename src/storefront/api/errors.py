"""Translate domain errors into JSON responses.

    ValidationError family     -> 400 {"error": {field: [messages]}}
    InsufficientStockError     -> 400, plus "available"
    ObjectNotFoundError family -> 404 {"error": "message"}
    anything else              -> 500, logged with the traceback
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.shared.errors import InsufficientStockError, NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def insufficient_stock_handler(request: Request, exc: InsufficientStockError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages, "available": exc.available})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = exc.message if isinstance(exc, NotFoundError) else "Resource not found"
    return JSONResponse(status_code=404, content={"error": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InsufficientStockError, insufficient_stock_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
