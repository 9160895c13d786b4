"""
Translation of service layer errors into HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from structlog import get_logger

from library.core.models import ErrorResponse
from library.service.accounts import (
    BusinessLogicError,
    GroupNotFound,
    ProfileNotFound,
    UserNotFound,
)
from library.validators.base import ValidationFailure


async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=ErrorResponse(detail=str(exc)).model_dump(),
    )


async def business_logic_handler(
    request: Request, exc: BusinessLogicError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            detail="Business rule violated", message_key=exc.message_key
        ).model_dump(),
    )


async def validation_failure_handler(
    request: Request, exc: ValidationFailure
) -> JSONResponse:
    await get_logger().ainfo(
        "api.validation_failure", validator=exc.validator, path=request.url.path
    )
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            detail=f"Rejected by {exc.validator}", message_key=exc.message_key
        ).model_dump(),
    )


def add_exception_handlers(app: FastAPI) -> FastAPI:
    """
    Adds the handlers for every error the account service raises on purpose.
    Anything else (database errors included) stays a 500.
    """
    for not_found in (UserNotFound, GroupNotFound, ProfileNotFound):
        app.add_exception_handler(not_found, not_found_handler)

    app.add_exception_handler(BusinessLogicError, business_logic_handler)
    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    return app
