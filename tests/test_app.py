def test_root(client):
    assert client.get("/").json() == {"ok": True, "message": "AI Test Generator API"}


def test_api_root(client):
    assert client.get("/api").json() == {"message": "API is working"}


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
