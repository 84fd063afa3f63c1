"""
Request middleware: request ids, body size and content type checks, request logging.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from app.services.error_handler import ErrorHandlerService
from app.utils.exceptions import (
    APIException,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError
)

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")


class ValidationMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request preprocessing.
    Tags every request with a short id (echoed as ``X-Request-ID``), rejects
    oversized or non-JSON API bodies and logs requests and responses.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 1024 * 1024,
        enable_request_logging: bool = True,
        api_prefix: str = "/api"
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Reject bad bodies before routing; errors raised below still get the envelope."""
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
            self._validate_content_type(request)

            if self.enable_request_logging:
                self._log_request(request, request_id)

            response = await call_next(request)

            if self.enable_request_logging:
                self._log_response(request, response, request_id, time.time() - start_time)

        except APIException as exc:
            response = ErrorHandlerService.handle_api_exception(exc, request)
        except Exception as exc:
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        response.headers["X-Request-ID"] = request_id
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Reject bodies over ``max_request_size`` using the declared length.

        Raises:
            PayloadTooLargeError: If the declared body size exceeds the limit
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise ValidationError("Invalid content-length header")

        if size > self.max_request_size:
            raise PayloadTooLargeError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )

    def _validate_content_type(self, request: Request) -> None:
        """
        API bodies must be JSON.

        Raises:
            UnsupportedMediaTypeError: If a body is sent with another content type
        """
        if request.method not in BODY_METHODS:
            return

        if not request.url.path.startswith(self.api_prefix):
            return

        content_type = request.headers.get("content-type", "")
        if content_type and not content_type.startswith("application/json"):
            raise UnsupportedMediaTypeError(
                f"Unsupported content type '{content_type}'. Expected 'application/json'"
            )

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"

    def _log_request(self, request: Request, request_id: str) -> None:
        query = f"?{request.url.query}" if request.url.query else ""
        logger.info(
            f"[{request_id}] {request.method} {request.url.path}{query} from {self._get_client_ip(request)}"
        )

    def _log_response(self, request: Request, response: Response, request_id: str, elapsed: float) -> None:
        logger.info(f"[{request_id}] {response.status_code} {request.method} {request.url.path} in {elapsed:.3f}s")
