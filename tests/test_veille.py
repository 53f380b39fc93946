from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from veille_ia.models import Veille


def test_create_returns_record_owned_by_caller(client, alice):
    res = client.post(
        "/veille",
        json={"titre": "  Veille IA  ", "sujet": "LLM", "contexte": "   ", "resultat": " texte "},
        headers=alice,
    )
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["userId"] == "user-alice"
    assert body["titre"] == "Veille IA"
    assert body["contexte"] is None
    assert body["resultat"] == "texte"
    assert body["createdAt"] == body["updatedAt"]
    assert body["createdAt"].endswith("+00:00")


@pytest.mark.parametrize(
    "payload, code",
    [
        ({"sujet": "s"}, "MISSING_TITRE"),
        ({"titre": "   ", "sujet": "s"}, "MISSING_TITRE"),
        ({"titre": None, "sujet": "s"}, "MISSING_TITRE"),
        ({"titre": "t"}, "MISSING_SUJET"),
        ({"titre": "t", "sujet": ""}, "MISSING_SUJET"),
        ({"titre": "t", "sujet": "s", "contexte": 12}, "INVALID_CONTEXTE"),
        ({"titre": "t", "sujet": "s", "userId": "user-bob"}, "USER_ID_NOT_ALLOWED"),
        ({"user_id": "user-bob"}, "USER_ID_NOT_ALLOWED"),
    ],
)
def test_create_validation_codes(client, alice, payload, code):
    res = client.post("/veille", json=payload, headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == code


def test_create_rejects_non_object_body(client, alice):
    res = client.post("/veille", json=["titre", "sujet"], headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_BODY"


def test_list_is_scoped_and_newest_first(client, alice, bob, make_veille):
    first = make_veille(titre="A")
    second = make_veille(titre="B")
    make_veille(headers=bob, titre="C")

    res = client.get("/veille", headers=alice)
    assert res.status_code == 200
    assert [v["id"] for v in res.json()] == [second["id"], first["id"]]


def test_list_search_is_case_insensitive_substring(client, alice, make_veille):
    make_veille(titre="Cybersécurité", sujet="Ransomware")
    make_veille(titre="Énergie", sujet="Hydrogène vert")
    make_veille(titre="Taux 100%", sujet="finance")

    res = client.get("/veille", params={"search": "RANSOM"}, headers=alice)
    assert [v["titre"] for v in res.json()] == ["Cybersécurité"]

    res = client.get("/veille", params={"search": "vert"}, headers=alice)
    assert [v["titre"] for v in res.json()] == ["Énergie"]

    res = client.get("/veille", params={"search": "%"}, headers=alice)
    assert [v["titre"] for v in res.json()] == ["Taux 100%"]

    res = client.get("/veille", params={"search": "introuvable"}, headers=alice)
    assert res.json() == []

    res = client.get("/veille", params={"search": "   "}, headers=alice)
    assert len(res.json()) == 3


def test_list_pagination_defaults_and_clamping(client, alice, make_veille):
    for i in range(12):
        make_veille(titre=f"V{i}")

    assert len(client.get("/veille", headers=alice).json()) == 10
    assert len(client.get("/veille", params={"limit": 0}, headers=alice).json()) == 1
    assert len(client.get("/veille", params={"limit": 1000}, headers=alice).json()) == 12
    assert len(client.get("/veille", params={"limit": "abc"}, headers=alice).json()) == 10
    assert len(client.get("/veille", params={"limit": "²"}, headers=alice).json()) == 10
    assert len(client.get("/veille", params={"limit": "+-5", "offset": "--1"}, headers=alice).json()) == 10
    assert len(client.get("/veille", params={"offset": 10}, headers=alice).json()) == 2
    assert len(client.get("/veille", params={"offset": -5}, headers=alice).json()) == 10

    page = client.get("/veille", params={"limit": 2, "offset": 1}, headers=alice).json()
    assert [v["titre"] for v in page] == ["V10", "V9"]


def test_get_one_checks_id_existence_and_owner(client, alice, bob, make_veille):
    veille = make_veille()

    res = client.get(f"/veille/{veille['id']}", headers=alice)
    assert res.status_code == 200
    assert res.json()["id"] == veille["id"]

    for bad_id in ("abc", "²", "+-5", "--1", "1.5"):
        res = client.get(f"/veille/{bad_id}", headers=alice)
        assert res.status_code == 400, bad_id
        assert res.json()["code"] == "INVALID_ID"

    for method in ("PUT", "DELETE"):
        res = client.request(method, "/veille/²", json={"titre": "x"}, headers=alice)
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_ID"

    assert client.get("/veille/+-5/sections", headers=alice).json()["code"] == "INVALID_ID"

    res = client.get("/veille/9999", headers=alice)
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"

    res = client.get(f"/veille/{veille['id']}", headers=bob)
    assert res.status_code == 403
    body = res.json()
    assert body["code"] == "FORBIDDEN"
    assert "titre" not in body


def test_update_is_partial_and_refreshes_updated_at(client, alice, make_veille):
    veille = make_veille(contexte="ancien contexte")

    res = client.put(f"/veille/{veille['id']}", json={"titre": " Nouveau "}, headers=alice)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["titre"] == "Nouveau"
    assert body["sujet"] == veille["sujet"]
    assert body["contexte"] == "ancien contexte"
    assert datetime.fromisoformat(body["updatedAt"]) > datetime.fromisoformat(veille["updatedAt"])
    assert body["createdAt"] == veille["createdAt"]

    res = client.put(f"/veille/{veille['id']}", json={"contexte": None}, headers=alice)
    assert res.status_code == 200
    assert res.json()["contexte"] is None
    assert res.json()["titre"] == "Nouveau"


@pytest.mark.parametrize(
    "payload, code",
    [
        ({"titre": None}, "INVALID_TITRE"),
        ({"titre": "  "}, "INVALID_TITRE"),
        ({"titre": 3}, "INVALID_TITRE"),
        ({"sujet": ""}, "INVALID_SUJET"),
        ({"contexte": ["x"]}, "INVALID_CONTEXTE"),
        ({"resultat": 1.5}, "INVALID_RESULTAT"),
        ({"userId": "user-bob", "titre": "x"}, "USER_ID_NOT_ALLOWED"),
    ],
)
def test_update_validation_codes(client, alice, make_veille, payload, code):
    veille = make_veille()
    res = client.put(f"/veille/{veille['id']}", json=payload, headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == code


def test_update_by_other_user_is_forbidden(client, alice, bob, make_veille):
    veille = make_veille()
    res = client.put(f"/veille/{veille['id']}", json={"titre": "piraté"}, headers=bob)
    assert res.status_code == 403

    res = client.get(f"/veille/{veille['id']}", headers=alice)
    assert res.json()["titre"] == veille["titre"]


def test_update_check_order(client, alice, bob, make_veille):
    veille = make_veille()

    # userId refusé avant toute lecture
    res = client.put("/veille/9999", json={"userId": "x", "titre": ""}, headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == "USER_ID_NOT_ALLOWED"

    # existence puis propriété, avant la validation des champs
    res = client.put("/veille/9999", json={"titre": ""}, headers=alice)
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"

    res = client.put(f"/veille/{veille['id']}", json={"titre": ""}, headers=bob)
    assert res.status_code == 403
    assert res.json()["code"] == "FORBIDDEN"

    res = client.put(f"/veille/{veille['id']}", json={"titre": ""}, headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_TITRE"


def test_delete_twice_then_not_found(client, alice, bob, make_veille):
    veille = make_veille()

    res = client.delete(f"/veille/{veille['id']}", headers=bob)
    assert res.status_code == 403

    res = client.delete(f"/veille/{veille['id']}", headers=alice)
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Veille deleted successfully"
    assert body["deleted"]["id"] == veille["id"]
    assert body["deleted"]["titre"] == veille["titre"]

    res = client.delete(f"/veille/{veille['id']}", headers=alice)
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"


def test_sections_of_report(client, alice, bob, make_veille):
    veille = make_veille(resultat="## Résumé exécutif\nTout va bien.\n## Recommandations\nAgir vite.")

    res = client.get(f"/veille/{veille['id']}/sections", headers=alice)
    assert res.status_code == 200
    body = res.json()
    assert body["veilleId"] == veille["id"]
    assert [(s["title"], s["category"], s["color"]) for s in body["sections"]] == [
        ("Résumé exécutif", "summary", "blue"),
        ("Recommandations", "recommendations", "yellow"),
    ]

    empty = make_veille()
    res = client.get(f"/veille/{empty['id']}/sections", headers=alice)
    assert res.json()["sections"] == []

    res = client.get(f"/veille/{veille['id']}/sections", headers=bob)
    assert res.status_code == 403


def test_list_limit_hard_cap(client, alice, db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    now = datetime.now(timezone.utc)
    with Session(engine) as s:
        s.add_all(
            [
                Veille(user_id="user-alice", titre=f"V{i}", sujet="s", created_at=now, updated_at=now)
                for i in range(105)
            ]
        )
        s.commit()
    engine.dispose()

    assert len(client.get("/veille", params={"limit": 1000}, headers=alice).json()) == 100
    assert len(client.get("/veille", headers=alice).json()) == 10
