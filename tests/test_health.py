def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["features"]["notifications_dry_run"] is True
    assert data["features"]["ai_responder_enabled"] is False


def test_ready_endpoint(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "database": "connected"}


def test_ready_endpoint_database_down(client, db, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "execute", broken_execute)
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["database"] == "disconnected"
