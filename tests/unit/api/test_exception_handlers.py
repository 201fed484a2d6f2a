"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.exception_handlers import setup_exception_handlers
from core.exceptions import AuthError, AuthErrorCode, GameNotFoundError, InsufficientRoleError
from domain.repositories.errors import UniqueViolation


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_returns_error_code_and_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise GameNotFoundError(42)

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "GAME_NOT_FOUND"
        assert "42" in body["message"]
        assert body["details"]["game_id"] == 42

    @pytest.mark.asyncio
    async def test_auth_error_carries_localized_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-auth")
        async def _() -> None:
            raise AuthError(AuthErrorCode.INVALID_CREDENTIALS, "Invalid login credentials")

        response = await _get(app, "/raise-auth")

        assert response.status_code == 401
        body = response.json()
        assert body["error_code"] == "INVALID_CREDENTIALS"
        assert body["message"] == "Email ou senha incorretos"
        assert body["details"]["reason"] == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_insufficient_role_is_403(self) -> None:
        app = _create_test_app()

        @app.get("/raise-role")
        async def _() -> None:
            raise InsufficientRoleError("admin")

        response = await _get(app, "/raise-role")

        assert response.status_code == 403
        assert response.json()["details"]["required_role"] == "admin"

    @pytest.mark.asyncio
    async def test_unique_violation_is_a_conflict(self) -> None:
        app = _create_test_app()

        @app.get("/raise-unique")
        async def _() -> None:
            raise UniqueViolation("uq_user_game_list")

        response = await _get(app, "/raise-unique")

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "CONSISTENCY_CONFLICT"
        assert body["details"]["constraint"] == "uq_user_game_list"

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        from starlette.exceptions import HTTPException

        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_validation_error_returns_field_details(self) -> None:
        from pydantic import BaseModel, Field

        app = _create_test_app()

        class Body(BaseModel):
            rating: int = Field(..., ge=1, le=5)

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"rating": 9})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.rating"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()

        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
