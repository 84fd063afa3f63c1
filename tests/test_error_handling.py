"""
Tests for the error envelope, request ids and the request middleware checks.
"""

import pytest
from httpx import AsyncClient
from fastapi import status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from app.main import app
from app.schemas.user import SignupRequest
from app.services.error_handler import ErrorHandlerService
from app.utils.dependencies import get_spot_service
from app.utils.exceptions import NotFoundError, DuplicateResourceError, ResourceLimitExceededError
from app.utils.validators import field_errors_from
from tests.conftest import assert_error_envelope


class TestErrorEnvelope:
    """Error bodies share one format across exception types."""

    def test_format_error_response(self):
        body = ErrorHandlerService.format_error_response(
            error_code="NOT_FOUND",
            message="Spot couldn't be found",
            request_id="abc123"
        )

        assert body["message"] == "Spot couldn't be found"
        assert body["code"] == "NOT_FOUND"
        assert body["requestId"] == "abc123"
        assert "timestamp" in body
        assert "errors" not in body

    def test_api_exception_with_field_errors(self):
        response = ErrorHandlerService.handle_api_exception(
            DuplicateResourceError("User with that email already exists", field="email")
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert b'"errors":{"email":"User with that email already exists"}' in response.body

    def test_exception_status_codes(self):
        assert NotFoundError("Review").status_code == 404
        assert NotFoundError("Review").detail == "Review couldn't be found"
        assert ResourceLimitExceededError().status_code == 403

    def test_pydantic_errors_keyed_by_field(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            SignupRequest.model_validate({"firstName": "A", "lastName": "B", "username": "abcd", "password": "secret"})

        assert field_errors_from(exc_info.value.errors()) == {"email": "Invalid email"}

    def test_request_validation_error_is_bad_request(self):
        exc = RequestValidationError([
            {"loc": ("body", "stars"), "msg": "Stars must be from 1 to 5", "type": "decimal_range"}
        ])

        response = ErrorHandlerService.handle_validation_error(exc)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert b'"stars":"Stars must be from 1 to 5"' in response.body


class TestRequestMiddleware:
    """Integration tests for request ids and body checks."""

    @pytest.mark.asyncio
    async def test_request_id_header_matches_body(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.headers["X-Request-ID"] == response.json()["requestId"]

    @pytest.mark.asyncio
    async def test_request_id_on_success(self, async_client: AsyncClient):
        response = await async_client.get("/api/spots")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/nowhere")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert_error_envelope(response.json(), "HTTP_404")

    @pytest.mark.asyncio
    async def test_non_json_body_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/session",
            content="credential=demo&password=password",
            headers={"Content-Type": "application/x-www-form-urlencoded"}
        )

        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        assert_error_envelope(response.json(), "UNSUPPORTED_MEDIA_TYPE")

    @pytest.mark.asyncio
    async def test_oversized_body_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/session",
            content=b"{" + b" " * (1024 * 1024) + b"}",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert_error_envelope(response.json(), "PAYLOAD_TOO_LARGE")

    @pytest.mark.asyncio
    async def test_malformed_json_is_bad_request(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/session",
            content="{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert_error_envelope(response.json(), "VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_hidden(self, async_client: AsyncClient):
        def broken_service():
            raise RuntimeError("connection details that must not leak")

        app.dependency_overrides[get_spot_service] = broken_service

        response = await async_client.get("/api/spots")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert_error_envelope(data, "INTERNAL_SERVER_ERROR")
        assert "connection details" not in response.text


class TestHealth:

    @pytest.mark.asyncio
    async def test_root(self, async_client: AsyncClient):
        response = await async_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["api_prefix"] == "/api"

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["database"] == "connected"
