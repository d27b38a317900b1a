"""
HTTP tests for the message store service.
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient
from sqlalchemy import text

from message_store.core.config import CorsPolicy
from message_store.core.database import Database
from message_store.core.security import SecurityHeadersMiddleware
from message_store.main import create_app
from message_store.service import MessageStoreService


def enqueue(client, user_id: str, queued: bool, msgs):
    return client.post("/messages", json={"user_id": user_id, "queued": queued, "msgs": msgs})


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_liveness_always_returns_ok(self, client):
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness_returns_ok_when_migrated(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["checks"] == {"database": "ok", "migrations": "ok"}

    def test_readiness_reports_pending_migrations(self, make_settings):
        service = MessageStoreService(make_settings())
        try:
            response = TestClient(service.app).get("/health/ready")
        finally:
            service.close()

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "not ready"
        assert data["checks"]["migrations"] == "pending"


class TestEnqueueEndpoint:
    """Tests for POST /messages."""

    def test_enqueue_returns_inserted_texts(self, client):
        response = enqueue(client, "u1", True, ["Hello", "World"])
        assert response.status_code == 200
        assert response.json() == ["Hello", "World"]

    def test_enqueue_empty_batch_is_rejected(self, client):
        response = enqueue(client, "u1", True, [])
        assert response.status_code == 422
        assert response.json() == {"error": "msgs must contain at least one message"}

    def test_enqueue_missing_field_is_rejected(self, client):
        response = client.post("/messages", json={"user_id": "u1", "msgs": ["x"]})
        assert response.status_code == 422

    def test_enqueue_malformed_json_is_rejected(self, client):
        response = client.post(
            "/messages",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    def test_enqueue_empty_strings_pass_through(self, client):
        response = enqueue(client, "", False, [""])
        assert response.status_code == 200
        assert response.json() == [""]


class TestListEndpoints:
    """Tests for GET /messages/{user_id} and GET /messages/{user_id}/queued."""

    def test_list_unknown_user_is_empty(self, client):
        response = client.get("/messages/nobody")
        assert response.status_code == 200
        assert response.json() == []

        response = client.get("/messages/nobody/queued")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_preserves_insertion_order(self, client):
        enqueue(client, "u1", True, ["one", "two"])
        enqueue(client, "u1", True, ["three"])

        response = client.get("/messages/u1")
        assert response.json() == ["one", "two", "three"]

    def test_list_queued(self, client):
        enqueue(client, "u1", True, ["a", "b"])

        response = client.get("/messages/u1/queued")
        assert response.status_code == 200
        assert sorted(response.json()) == ["a", "b"]


class TestUnqueueEndpoint:
    """Tests for PUT /messages/{user_id}/unqueue."""

    def test_unqueue_returns_updated_texts(self, client):
        enqueue(client, "u1", True, ["a", "b"])

        response = client.put("/messages/u1/unqueue")
        assert response.status_code == 200
        assert set(response.json()) == {"a", "b"}
        assert client.get("/messages/u1/queued").json() == []

    def test_conversation_scenario(self, client):
        enqueue(client, "u1", False, ["hi"])
        enqueue(client, "u1", True, ["there"])

        assert client.get("/messages/u1").json() == ["hi", "there"]
        assert client.get("/messages/u1/queued").json() == ["there"]
        assert client.put("/messages/u1/unqueue").json() == ["hi", "there"]
        assert client.get("/messages/u1/queued").json() == []


class TestStorageFailures:
    """Database errors surface as 500 with a generic description."""

    def _drop_table(self, service):
        with service.database.engine.begin() as conn:
            conn.execute(text("DROP TABLE messages"))

    def test_list_failure_returns_500(self, service, client):
        self._drop_table(service)

        response = client.get("/messages/u1")
        assert response.status_code == 500
        assert response.json() == {"error": "list_all failed"}

    def test_enqueue_failure_returns_500(self, service, client):
        self._drop_table(service)

        response = enqueue(client, "u1", True, ["lost"])
        assert response.status_code == 500
        assert response.json() == {"error": "enqueue failed"}

    def test_unqueue_failure_returns_500(self, service, client):
        self._drop_table(service)

        response = client.put("/messages/u1/unqueue")
        assert response.status_code == 500
        assert response.json() == {"error": "unqueue failed"}

    def test_list_queued_failure_returns_500(self, service, client):
        self._drop_table(service)

        response = client.get("/messages/u1/queued")
        assert response.status_code == 500
        assert response.json() == {"error": "list_queued failed"}


class TestSecurityHeaders:
    """Tests for the security header middleware."""

    def test_headers_on_api_responses(self, client):
        response = client.get("/messages/u1")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert "default-src 'self'" in response.headers["Content-Security-Policy"]

    def test_docs_page_has_no_csp(self, client):
        response = client.get("/docs")
        assert response.status_code == 200
        assert "Content-Security-Policy" not in response.headers
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_headers_can_be_disabled(self, make_settings):
        service = MessageStoreService(make_settings(security_headers=False))
        try:
            response = TestClient(service.app).get("/health/live")
        finally:
            service.close()
        assert "X-Content-Type-Options" not in response.headers

    def test_powered_by_header_is_removed(self):
        app = FastAPI()

        @app.get("/banner")
        async def banner():
            return PlainTextResponse("hi", headers={"X-Powered-By": "Express"})

        app.add_middleware(SecurityHeadersMiddleware)
        response = TestClient(app).get("/banner")

        assert response.status_code == 200
        assert "X-Powered-By" not in response.headers
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestAccessLog:
    """Tests for the per-request access log."""

    def _access_records(self, caplog):
        return [record for record in caplog.records if record.name == "message_store.access"]

    def test_logs_one_line_per_request(self, client, app_logs):
        client.get("/messages/u1", headers={"User-Agent": "chat-widget/1.0"})

        records = self._access_records(app_logs)
        assert len(records) == 1
        fields = records[0].extra_data
        assert fields["method"] == "GET"
        assert fields["path"] == "/messages/u1"
        assert fields["status"] == 200
        assert fields["duration_ms"] >= 0
        assert fields["client"] == "testclient"
        assert fields["user_agent"] == "chat-widget/1.0"
        assert records[0].getMessage() == 'testclient "GET /messages/u1" 200'

    def test_logs_error_status(self, service, client, app_logs):
        with service.database.engine.begin() as conn:
            conn.execute(text("DROP TABLE messages"))

        client.put("/messages/u1/unqueue")

        records = self._access_records(app_logs)
        assert [record.extra_data["status"] for record in records] == [500]


class TestCors:
    """Tests for the CORS policy."""

    def test_default_policy_allows_any_origin(self, client):
        response = client.get("/messages/u1", headers={"Origin": "https://anywhere.example"})
        assert response.headers["access-control-allow-origin"] in ("*", "https://anywhere.example")

    def test_default_policy_preflight(self, client):
        response = client.options(
            "/messages/u1/unqueue",
            headers={
                "Origin": "https://anywhere.example",
                "Access-Control-Request-Method": "PUT",
            },
        )
        assert response.status_code == 200
        assert "PUT" in response.headers["access-control-allow-methods"]

    def test_configured_policy_rejects_other_origins(self, make_settings):
        policy = CorsPolicy(origin=["https://chat.example.com"], methods=["GET"])
        service = MessageStoreService(make_settings(cors=policy))
        try:
            client = TestClient(service.app)
            allowed = client.options(
                "/messages/u1",
                headers={
                    "Origin": "https://chat.example.com",
                    "Access-Control-Request-Method": "GET",
                },
            )
            denied = client.options(
                "/messages/u1",
                headers={
                    "Origin": "https://evil.example.com",
                    "Access-Control-Request-Method": "GET",
                },
            )
        finally:
            service.close()

        assert allowed.status_code == 200
        assert allowed.headers["access-control-allow-origin"] == "https://chat.example.com"
        assert denied.status_code == 400


class TestCreateApp:
    """Tests for the application factory."""

    def test_app_borrows_database_handle(self, settings):
        database = Database(settings.database_url)
        try:
            app = create_app(settings, database)
            assert app.state.database is database
            assert app.state.settings is settings
            assert TestClient(app).get("/health/live").status_code == 200
        finally:
            database.dispose()
