from veille_ia.core.settings import settings


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "env": settings.ENV, "model": settings.OPENAI_MODEL}


def test_system_status_reports_last_generation(client, alice, ai, make_veille):
    res = client.get("/system/status")
    assert res.status_code == 200
    body = res.json()
    assert body["db"] == {"ok": True}
    assert body["ai"]["ok"] is False
    assert body["ok"] is False
    assert body["last_generation"] is None

    veille = make_veille()
    ai.reply = "Rapport"
    client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)

    body = client.get("/system/status").json()
    assert body["last_generation"] is not None


def test_rate_limit_on_generation(client, alice, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_RPM", 2)

    for _ in range(2):
        res = client.post("/generate-veille", json={}, headers=alice)
        assert res.status_code == 400

    res = client.post("/generate-veille", json={}, headers=alice)
    assert res.status_code == 429
    body = res.json()
    assert body["code"] == "RATE_LIMITED"
    assert body["details"] == {"limit_rpm": 2}
    assert res.headers["X-Request-Id"] == body["request_id"]

    # Les autres routes ne sont pas limitées
    assert client.get("/veille", headers=alice).status_code == 200


def test_rate_limit_is_per_caller(client, alice, bob, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_RPM", 1)

    assert client.post("/generate-veille", json={}, headers=alice).status_code == 400
    assert client.post("/generate-veille", json={}, headers=alice).status_code == 429
    assert client.post("/generate-veille", json={}, headers=bob).status_code == 400


def test_unknown_route_uses_error_envelope(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"
