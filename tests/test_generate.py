import httpx
import openai
import pytest

from veille_ia.api.deps import get_report_generator
from veille_ia.db.session import get_db
from veille_ia.main import app
from veille_ia.services.report_generator import SYSTEM_PROMPT, ReportGenerator, build_prompt

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _status_error(cls, status: int, message: str):
    request = httpx.Request("POST", OPENAI_URL)
    return cls(message, response=httpx.Response(status, request=request), body=None)


def test_generate_then_history_lists_one_entry(client, alice, ai, make_veille):
    veille = make_veille()
    ai.reply = "Hello"

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["success"] is True
    assert body["content"] == "Hello"
    assert body["veille"]["id"] == veille["id"]
    assert body["veille"]["resultat"] == "Hello"

    res = client.get("/historique", params={"veilleId": veille["id"]}, headers=alice)
    entries = res.json()
    assert len(entries) == 1
    assert entries[0]["contenu"] == "Hello"
    assert entries[0]["veilleId"] == veille["id"]

    stored = client.get(f"/veille/{veille['id']}", headers=alice).json()
    assert stored["resultat"] == "Hello"
    assert stored["updatedAt"] == entries[0]["createdAt"]


def test_generate_trims_output_and_builds_prompt(client, alice, ai, make_veille):
    veille = make_veille()
    ai.reply = "\n  ## Résumé exécutif\nContenu  \n"

    res = client.post(
        "/generate-veille",
        json={"veilleId": veille["id"], "sujet": "  Hydrogène ", "contexte": " marché européen "},
        headers=alice,
    )
    assert res.status_code == 200
    assert res.json()["content"] == "## Résumé exécutif\nContenu"

    system, prompt = ai.calls[0]
    assert system == SYSTEM_PROMPT
    assert prompt == build_prompt("Hydrogène", "marché européen")
    assert "Sujet de la veille : Hydrogène" in prompt
    assert "Contexte additionnel : marché européen" in prompt


def test_empty_output_mutates_nothing(client, alice, ai, make_veille):
    veille = make_veille()
    ai.reply = "   "

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == 500
    assert res.json()["code"] == "GENERATION_FAILED"

    assert client.get(f"/veille/{veille['id']}", headers=alice).json()["resultat"] is None
    assert client.get("/historique", headers=alice).json() == []


@pytest.mark.parametrize(
    "payload, code",
    [
        ({"sujet": "IA"}, "MISSING_VEILLE_ID"),
        ({"veilleId": "douze", "sujet": "IA"}, "INVALID_VEILLE_ID"),
        ({"veilleId": 1}, "MISSING_SUJET"),
        ({"veilleId": 1, "sujet": "  "}, "MISSING_SUJET"),
    ],
)
def test_generate_validation_codes(client, alice, ai, payload, code):
    res = client.post("/generate-veille", json=payload, headers=alice)
    assert res.status_code == 400
    assert res.json()["code"] == code
    assert ai.calls == []


def test_generate_checks_veille_before_calling_ai(client, alice, bob, ai, make_veille):
    res = client.post("/generate-veille", json={"veilleId": 9999, "sujet": "IA"}, headers=alice)
    assert res.status_code == 404
    assert res.json()["code"] == "VEILLE_NOT_FOUND"

    veille = make_veille()
    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=bob)
    assert res.status_code == 403
    assert ai.calls == []


def test_missing_api_key(client, alice, ai, make_veille):
    veille = make_veille()
    app.dependency_overrides[get_report_generator] = lambda: ReportGenerator(
        api_key="", client_factory=lambda key: ai
    )

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == 500
    body = res.json()
    assert body["code"] == "OPENAI_KEY_MISSING"
    assert "clé API OpenAI" in body["message"]
    assert ai.calls == []

    # Propriété vérifiée avant la clé
    res = client.post("/generate-veille", json={"veilleId": 9999, "sujet": "IA"}, headers=alice)
    assert res.json()["code"] == "VEILLE_NOT_FOUND"


@pytest.mark.parametrize(
    "error, status, code",
    [
        (_status_error(openai.AuthenticationError, 401, "bad key"), 500, "OPENAI_AUTH_ERROR"),
        (_status_error(openai.RateLimitError, 429, "slow down"), 429, "OPENAI_RATE_LIMIT"),
    ],
)
def test_provider_errors_are_translated(client, alice, ai, make_veille, error, status, code):
    veille = make_veille()
    ai.error = error

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == status
    assert res.json()["code"] == code
    assert len(ai.calls) == 1
    assert client.get("/historique", headers=alice).json() == []


def test_other_provider_error_is_internal(client, alice, ai, make_veille):
    veille = make_veille()
    ai.error = openai.APIConnectionError(message="upstream down", request=httpx.Request("POST", OPENAI_URL))

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == 500
    body = res.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert body["error"] == "Internal server error: upstream down"


def test_build_prompt_without_context():
    prompt = build_prompt(" IA ", "   ")
    assert "Sujet de la veille : IA" in prompt
    assert "Contexte additionnel" not in prompt
    for label in ("résumé exécutif", "tendances", "acteurs principaux", "enjeux", "recommandations"):
        assert label in prompt.lower()


def test_db_transaction_closed_during_ai_call(client, alice, make_veille):
    veille = make_veille()

    sessions = []
    request_db = app.dependency_overrides[get_db]

    async def tracking_get_db():
        async for session in request_db():
            sessions.append(session)
            yield session

    in_transaction = []

    class TransactionCheckingClient:
        async def complete(self, system: str, prompt: str) -> str:
            in_transaction.append(any(s.in_transaction() for s in sessions))
            return "Rapport"

    app.dependency_overrides[get_db] = tracking_get_db
    app.dependency_overrides[get_report_generator] = lambda: ReportGenerator(
        api_key="sk-test", client_factory=lambda key: TransactionCheckingClient()
    )

    res = client.post("/generate-veille", json={"veilleId": veille["id"], "sujet": "IA"}, headers=alice)
    assert res.status_code == 200, res.text
    assert sessions
    assert in_transaction == [False]

    entries = client.get("/historique", params={"veilleId": veille["id"]}, headers=alice).json()
    assert [e["contenu"] for e in entries] == ["Rapport"]
