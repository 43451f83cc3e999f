"""
Tests for error handling and response formatting.
Tests custom exceptions, the error envelope and request ids.
"""

import pytest
from httpx import AsyncClient

from rental_api.models.user import User
from rental_api.services.error_handler import ErrorHandlerService, REQUEST_ID_HEADER
from rental_api.utils.exceptions import (
    ConflictError,
    FileUploadError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    PropertyOwnershipError,
    UnauthorizedError,
    ValidationError
)
from tests.conftest import DEFAULT_PASSWORD, auth_headers


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        """Test error response formatting."""
        response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=[{"field": "title", "message": "Title is required"}]
        )

        assert response == {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": [{"field": "title", "message": "Title is required"}]
            }
        }

    def test_format_error_response_minimal(self):
        response = ErrorHandlerService.format_error_response("NOT_FOUND", "Property not found")

        assert response == {"error": {"code": "NOT_FOUND", "message": "Property not found"}}

    def test_format_error_response_with_reason(self):
        response = ErrorHandlerService.format_error_response("UNAUTHORIZED", "Unauthorized", reason="Token expired")

        assert response["error"]["reason"] == "Token expired"

    def test_request_id_generated(self):
        request_id = ErrorHandlerService.get_request_id(None)

        assert len(request_id) == 8


class TestCustomExceptions:
    """Test status codes and error codes of custom exceptions."""

    @pytest.mark.parametrize("exception,status_code,error_code", [
        (ValidationError("bad"), 400, "VALIDATION_ERROR"),
        (ConflictError("Admin already exists"), 400, "CONFLICT"),
        (UnauthorizedError(reason="Missing bearer token"), 401, "UNAUTHORIZED"),
        (InvalidCredentialsError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (PropertyOwnershipError("edit"), 403, "FORBIDDEN"),
        (NotFoundError("Property"), 404, "NOT_FOUND"),
        (FileUploadError("too big"), 400, "VALIDATION_ERROR"),
    ])
    def test_status_and_code(self, exception, status_code, error_code):
        assert exception.status_code == status_code
        assert exception.error_code == error_code

    def test_unauthorized_has_uniform_message(self):
        error = UnauthorizedError(reason="Token expired")

        assert error.detail == "Unauthorized"
        assert error.headers == {"WWW-Authenticate": "Bearer"}

    def test_file_upload_error_details(self):
        error = FileUploadError("At least one image is required")

        assert error.detail == "File upload error: At least one image is required"
        assert error.field_errors == [{"field": "images", "message": "At least one image is required"}]


class TestErrorResponses:
    """Test error envelopes returned over HTTP."""

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, async_client: AsyncClient, test_residential: User):
        wrong_password = await async_client.post(
            "/api/auth/login",
            json={"email": "resi@example.com", "password": "not-the-password"}
        )
        unknown_email = await async_client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json() == {"error": {"code": "UNAUTHORIZED", "message": "Invalid credentials"}}

    @pytest.mark.asyncio
    async def test_missing_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/properties")

        assert response.status_code == 401
        assert response.json() == {
            "error": {"code": "UNAUTHORIZED", "message": "Unauthorized", "reason": "Missing bearer token"}
        }
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_invalid_token(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/properties",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        body = response.json()
        assert response.status_code == 401
        assert body["error"]["message"] == "Unauthorized"
        assert body["error"]["reason"].startswith("Invalid token")

    @pytest.mark.asyncio
    async def test_request_id_header(self, async_client: AsyncClient):
        response = await async_client.get("/api/health")

        assert response.status_code == 200
        assert len(response.headers[REQUEST_ID_HEADER]) == 8

    @pytest.mark.asyncio
    async def test_error_carries_request_id_header(self, async_client: AsyncClient):
        response = await async_client.get("/api/users")

        assert response.status_code == 401
        assert REQUEST_ID_HEADER in response.headers
        assert "request_id" not in response.json()["error"]

    @pytest.mark.asyncio
    async def test_unknown_route(self, async_client: AsyncClient):
        response = await async_client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_forbidden_for_non_admin(self, async_client: AsyncClient, test_residential: User):
        response = await async_client.get("/api/properties/summary", headers=auth_headers(test_residential))

        assert response.status_code == 403
        assert response.json() == {"error": {"code": "FORBIDDEN", "message": "Forbidden"}}

    @pytest.mark.asyncio
    async def test_body_validation_error(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/login", json={"email": "not-an-email"})

        body = response.json()
        assert response.status_code == 400
        assert body["error"]["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in body["error"]["details"]}
        assert {"email", "password"} <= fields

    @pytest.mark.asyncio
    async def test_oversized_request(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login",
            content=b"{}",
            headers={"Content-Type": "application/json", "Content-Length": str(60 * 1024 * 1024)}
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"
