"""
Error handling service for consistent error response formatting and logging.
Every error leaves the API in one envelope: message, code, timestamp and request id,
plus a field-keyed ``errors`` map for validation failures.
"""

from typing import Dict, Any, Optional, Union
from datetime import datetime, timezone
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError as PydanticValidationError
from app.utils.exceptions import APIException
from app.utils.validators import field_errors_from
import logging
import uuid

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."

# Named constraints from the models, mapped to client messages
CONSTRAINT_MESSAGES = {
    "uq_reviews_user_spot": "User already has a review for this spot",
    "uq_spot_images_single_preview": "Spot already has a preview image",
    "users.email": "User with that email already exists",
    "users.username": "User with that username already exists",
    "ix_users_email": "User with that email already exists",
    "ix_users_username": "User with that username already exists",
    "ck_reviews_stars_range": "Stars must be from 1 to 5",
}


class ErrorHandlerService:
    """
    Turns exceptions into JSON error responses.

    Services and routers only raise; :func:`register_exception_handlers`
    wires these handlers into the application.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        errors: Optional[Dict[str, str]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the error envelope.

        ``requestId`` and ``errors`` are left out when empty.
        """
        body = {
            "message": message,
            "code": error_code,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        }
        if request_id:
            body["requestId"] = request_id
        if errors:
            body["errors"] = errors
        return body

    @classmethod
    def _respond(
        cls,
        request: Optional[Request],
        status_code: int,
        error_code: str,
        message: str,
        errors: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        body = cls.format_error_response(error_code, message, errors, cls._get_request_id(request))
        return JSONResponse(status_code=status_code, content=body, headers=headers)

    @classmethod
    def handle_api_exception(cls, exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        """Raised domain errors keep their status, code, message and field errors."""
        logger.warning(
            f"{exception.status_code} {exception.error_code} on {cls._path(request)}: {exception.detail}"
        )
        return cls._respond(
            request,
            exception.status_code,
            exception.error_code or "API_ERROR",
            exception.detail,
            errors=exception.field_errors,
            headers=exception.headers
        )

    @classmethod
    def handle_validation_error(
        cls,
        exception: Union[RequestValidationError, PydanticValidationError],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Body and query validation failures are 400 Bad Request.

        The ``errors`` map is keyed by the field name the client sent.
        """
        field_errors = field_errors_from(exception.errors())
        logger.warning(f"400 VALIDATION_ERROR on {cls._path(request)}: {sorted(field_errors)}")
        return cls._respond(request, 400, "VALIDATION_ERROR", "Bad Request", errors=field_errors)

    @classmethod
    def handle_database_error(cls, exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """
        Constraint violations that slipped past service checks become 409.

        Anything else from the database is a 500 without internal details.
        """
        if isinstance(exception, IntegrityError):
            message = cls._constraint_message(exception)
            logger.warning(f"409 INTEGRITY_ERROR on {cls._path(request)}: {exception.orig}")
            return cls._respond(request, 409, "CONFLICT", message)

        logger.error(f"Database error on {cls._path(request)}: {exception}", exc_info=exception)
        return cls._respond(request, 500, "DATABASE_ERROR", "Database operation failed")

    @classmethod
    def handle_http_exception(cls, exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        """Framework errors such as unknown routes (404) and wrong methods (405)."""
        logger.info(f"{exception.status_code} on {cls._path(request)}: {exception.detail}")
        return cls._respond(
            request,
            exception.status_code,
            f"HTTP_{exception.status_code}",
            str(exception.detail),
            headers=getattr(exception, "headers", None)
        )

    @classmethod
    def handle_unexpected_error(cls, exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        logger.error(
            f"Unhandled {type(exception).__name__} on {cls._path(request)}: {exception}",
            exc_info=exception
        )
        return cls._respond(request, 500, "INTERNAL_SERVER_ERROR", GENERIC_ERROR_MESSAGE)

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the request middleware, or mint one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _path(request: Optional[Request]) -> str:
        if request is None:
            return "-"
        return f"{request.method} {request.url.path}"

    @staticmethod
    def _constraint_message(exception: IntegrityError) -> str:
        """Client message for the violated constraint, if it can be identified."""
        error_msg = str(exception.orig)
        for constraint, message in CONSTRAINT_MESSAGES.items():
            if constraint in error_msg:
                return message

        lowered = error_msg.lower()
        if "foreign key" in lowered:
            return "Referenced record does not exist"
        return "Data integrity constraint violation"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on the application."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    # Query parameters are parsed with model_validate inside dependencies
    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return ErrorHandlerService.handle_unexpected_error(exc, request)
