"""
Response envelopes and the application-wide error handlers
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wedding_planner.schemas.common import StandardResponse, ErrorResponse
from wedding_planner.services.repositories import RecordNotFound, StoreError

logger = logging.getLogger(__name__)

def _envelope(body: BaseModel, status_code: int) -> JSONResponse:
    # Store records carry dates and datetimes
    return JSONResponse(content=jsonable_encoder(body), status_code=status_code)

def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return _envelope(StandardResponse(success=True, message=message, data=data), status_code)

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    return _envelope(ErrorResponse(message=message, error_code=error_code, details=details), status_code)

def file_too_large_error(max_size: int):
    raise HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File too large (max {max_size // (1024 * 1024)}MB)"
    )

def rate_limit_error():
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests from this address. Please wait a minute and try again."
    )

def register_error_handlers(app: FastAPI) -> None:
    """Map store and validation failures onto error envelopes"""

    @app.exception_handler(RecordNotFound)
    async def record_not_found_handler(request: Request, exc: RecordNotFound):
        return error_response(
            message=str(exc),
            error_code="NOT_FOUND",
            details={"table": exc.table, "id": exc.record_id},
            status_code=404
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
        return error_response(message=str(exc), error_code="STORE_ERROR", status_code=400)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return error_response(message=str(exc), error_code="INVALID_VALUE", status_code=400)
