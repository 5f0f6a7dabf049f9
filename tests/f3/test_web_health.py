"""Tests for health endpoint (F3)."""


def test_health_check(client):
    """Health endpoint reports the API version and database status."""
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["database"] == "ok"
    assert "timestamp" in data
