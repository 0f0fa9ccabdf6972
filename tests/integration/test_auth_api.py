from pathlib import Path

from fastapi.testclient import TestClient

from app.core.security import verify_access_token
from app.main import create_app
from app.services.auth_service import AuthService
from app.services.document_service import DocumentService
from tests.helpers import make_settings


class TestDevTokenEndpoint:
    def test_issues_usable_token(self, client: TestClient) -> None:
        response = client.post("/auth/test-token", json={"user_id": "alice"})

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "alice"
        assert body["token_type"] == "bearer"
        assert body["expires_in"] > 0

        headers = {"Authorization": f"Bearer {body['token']}"}
        history = client.get("/docs/history", headers=headers)
        assert history.status_code == 200
        assert history.json()["data"]["pagination"]["total"] == 0

    def test_token_follows_app_settings(
        self, tmp_path: Path, document_service: DocumentService
    ) -> None:
        settings = make_settings(tmp_path, SECRET_KEY="app-key", TEST_TOKEN_EXPIRE_HOURS=1)
        app = create_app(
            settings=settings,
            document_service=document_service,
            auth_service=AuthService(settings),
        )

        with TestClient(app) as client:
            body = client.post("/auth/test-token", json={"user_id": "alice"}).json()

        assert 3500 < body["expires_in"] <= 3600
        assert verify_access_token(body["token"], settings) == "alice"
        assert verify_access_token(body["token"], make_settings(tmp_path)) is None

    def test_blank_user_id(self, client: TestClient) -> None:
        response = client.post("/auth/test-token", json={"user_id": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "BadRequest"

    def test_missing_user_id(self, client: TestClient) -> None:
        assert client.post("/auth/test-token", json={}).status_code == 400

    def test_not_available_in_production(
        self, tmp_path: Path, document_service: DocumentService
    ) -> None:
        settings = make_settings(tmp_path, ENV="production")
        app = create_app(
            settings=settings,
            document_service=document_service,
            auth_service=AuthService(settings),
        )

        with TestClient(app) as client:
            response = client.post("/auth/test-token", json={"user_id": "alice"})

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"


class TestProductionAuth:
    def test_no_verifier_is_server_error(
        self, tmp_path: Path, document_service: DocumentService, auth_headers: dict
    ) -> None:
        settings = make_settings(tmp_path, ENV="production")
        app = create_app(
            settings=settings,
            document_service=document_service,
            auth_service=AuthService(settings),
        )

        with TestClient(app) as client:
            response = client.get("/docs/history", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Authentication service not available"

    def test_missing_token_is_still_unauthorized(
        self, tmp_path: Path, document_service: DocumentService
    ) -> None:
        settings = make_settings(tmp_path, ENV="production")
        app = create_app(
            settings=settings,
            document_service=document_service,
            auth_service=AuthService(settings),
        )

        with TestClient(app) as client:
            assert client.get("/docs/history").status_code == 401
