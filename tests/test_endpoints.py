"""
Tests for application-level endpoints and the shared error envelope.
"""
from app.config import settings


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health check endpoint should return healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": settings.VERSION}

    def test_openapi_served_under_api_prefix(self, client):
        response = client.get(f"{settings.API_PREFIX}/openapi.json")

        assert response.status_code == 200
        assert "/api/forms/{form_id}/publish" in response.json()["paths"]


class TestErrorResponses:
    """Tests for error response handling."""

    def test_404_uses_error_envelope(self, client):
        """Non-existent endpoint should return 404 as {"error": ...}."""
        response = client.get("/api/nonexistent")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_method_not_allowed(self, client):
        response = client.delete("/health")

        assert response.status_code == 405
        assert "error" in response.json()

    def test_request_id_on_every_response(self, client):
        first = client.get("/health")
        second = client.get("/health")

        assert first.headers["X-Request-ID"]
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]

    def test_client_request_id_not_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "client-chosen"})

        assert response.headers["X-Request-ID"] != "client-chosen"


class TestCORSHeaders:
    """Tests for CORS headers."""

    def test_preflight_for_allowed_origin(self, client):
        response = client.options(
            "/api/forms/abc123/publish",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "PATCH",
            }
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
