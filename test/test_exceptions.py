"""
Tests for custom exception classes and the global error handlers

Tests exception initialization, messages, status codes, error codes and
the JSON error envelope returned to clients.
"""

import json
import logging

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from streamcms.exception_handlers import get_http_error_code, register_exception_handlers
from streamcms.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CategoryNotFoundError,
    CMSException,
    CommentNotFoundError,
    DatabaseError,
    DuplicateResourceError,
    ErrorCode,
    FileTooLargeError,
    FileUploadError,
    InvalidCredentialsError,
    InvalidFileTypeError,
    MovieNotFoundError,
    ResourceInUseError,
    ResourceNotFoundError,
    UserNotFoundError,
    ValidationError,
)


class TestCMSException:
    """Test base CMSException class"""

    def test_defaults(self):
        exc = CMSException("Test error")
        assert str(exc) == "Test error"
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.details == {}
        assert exc.error_code is ErrorCode.INTERNAL_ERROR

    def test_custom_error_code(self):
        exc = CMSException("Busy", status_code=503, error_code=ErrorCode.SERVICE_UNAVAILABLE)
        assert exc.error_code is ErrorCode.SERVICE_UNAVAILABLE
        # The class default is untouched
        assert CMSException.error_code is ErrorCode.INTERNAL_ERROR


class TestAuthExceptions:
    def test_authentication_error(self):
        exc = AuthenticationError()
        assert exc.message == "Authentication failed"
        assert exc.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc.error_code is ErrorCode.AUTH_FAILED

    def test_invalid_credentials_is_authentication_error(self):
        exc = InvalidCredentialsError()
        assert isinstance(exc, AuthenticationError)
        assert exc.message == "Invalid email or password"

    def test_authorization_error(self):
        exc = AuthorizationError(required_role="admin,superadmin")
        assert exc.status_code == status.HTTP_403_FORBIDDEN
        assert exc.details == {"required_role": "admin,superadmin"}


class TestNotFoundExceptions:
    def test_generic(self):
        exc = ResourceNotFoundError("Poster")
        assert exc.message == "Poster not found"
        assert exc.status_code == status.HTTP_404_NOT_FOUND

    def test_movie_by_slug(self):
        exc = MovieNotFoundError("ghost-movie")
        assert exc.message == "Movie with slug 'ghost-movie' not found"
        assert exc.details == {"resource_type": "Movie", "resource_id": "ghost-movie"}
        assert exc.error_code is ErrorCode.RESOURCE_MOVIE_NOT_FOUND

    def test_movie_by_id(self):
        exc = MovieNotFoundError(movie_id=12)
        assert exc.message == "Movie with id '12' not found"

    @pytest.mark.parametrize(
        "exc, code",
        [
            (CategoryNotFoundError("drama"), ErrorCode.RESOURCE_CATEGORY_NOT_FOUND),
            (CommentNotFoundError(3), ErrorCode.RESOURCE_COMMENT_NOT_FOUND),
            (UserNotFoundError(9), ErrorCode.RESOURCE_USER_NOT_FOUND),
        ],
    )
    def test_specific_codes(self, exc, code):
        assert isinstance(exc, ResourceNotFoundError)
        assert exc.error_code is code


class TestValidationExceptions:
    def test_validation_error_with_field(self):
        exc = ValidationError("Bad slug", field="slug", details={"value": "!!!"})
        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert exc.details == {"value": "!!!", "field": "slug"}

    def test_duplicate(self):
        exc = DuplicateResourceError("Movie", "slug", "quantum-paradox")
        assert exc.status_code == status.HTTP_409_CONFLICT
        assert exc.message == "Movie with slug 'quantum-paradox' already exists"

    def test_in_use(self):
        exc = ResourceInUseError("Category", "drama", "movies", 4)
        assert exc.status_code == status.HTTP_409_CONFLICT
        assert exc.message == "Cannot delete category with associated movies"
        assert exc.details["movies"] == 4


class TestFileExceptions:
    def test_upload_error(self):
        exc = FileUploadError(filename="x.png")
        assert exc.details == {"filename": "x.png"}

    def test_invalid_type(self):
        exc = InvalidFileTypeError("image/gif", ["image/png"])
        assert exc.error_code is ErrorCode.UPLOAD_INVALID_TYPE
        assert exc.details["file_type"] == "image/gif"

    def test_too_large(self):
        exc = FileTooLargeError(6 * 1024 * 1024, 5 * 1024 * 1024)
        assert exc.message == "File too large. Maximum size is 5MB."

    def test_database_error(self):
        exc = DatabaseError(operation="increment_view_count")
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.details == {"operation": "increment_view_count"}


class Payload(BaseModel):
    count: int


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise MovieNotFoundError("ghost-movie")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.post("/payload")
    async def payload(data: Payload):
        return data

    @app.get("/paged")
    async def paged(page: int = 1):
        return {"page": page}

    return app


@pytest.fixture
async def error_client(error_app):
    async with AsyncClient(
        transport=ASGITransport(app=error_app, raise_app_exceptions=False), base_url="http://test"
    ) as ac:
        yield ac


class TestExceptionHandlers:
    async def test_cms_exception_envelope(self, error_client):
        response = await error_client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "status_code": 404,
                "error_code": "RESOURCE_MOVIE_NOT_FOUND",
                "message": "Movie with slug 'ghost-movie' not found",
                "type": "Not Found",
                "details": {"resource_type": "Movie", "resource_id": "ghost-movie"},
                "path": "/missing",
            }
        }

    async def test_unknown_route(self, error_client):
        response = await error_client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_NOT_FOUND"

    async def test_request_validation(self, error_client):
        response = await error_client.post("/payload", json={"count": "many"})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["error_code"] == "VALIDATION_FAILED"
        assert error["details"]["validation_errors"][0]["field"] == "count"

    async def test_unhandled_exception_hides_details(self, error_client, caplog):
        with caplog.at_level(logging.ERROR):
            response = await error_client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["error_code"] == "INTERNAL_ERROR"
        assert "secret internals" not in json.dumps(body)
        assert "secret internals" in caplog.text

    def test_http_error_code_mapping(self):
        assert get_http_error_code(401) == "AUTH_FAILED"
        assert get_http_error_code(418) == "UNKNOWN_ERROR"

    async def test_query_validation_names_the_parameter(self, error_client):
        response = await error_client.get("/paged", params={"page": "first"})

        assert response.status_code == 422
        assert response.json()["error"]["details"]["validation_errors"][0]["field"] == "page"


class TestErrorsThroughTheApp:
    async def test_error_carries_request_id(self, client: AsyncClient):
        response = await client.get("/api/movies/ghost-movie", headers={"X-Request-ID": "trace-42"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-42"
        assert response.json()["error"]["request_id"] == "trace-42"
