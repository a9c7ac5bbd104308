import uuid

import pytest
from fastapi.testclient import TestClient

from righthome import main
from righthome.services.session_service import WELCOME_MESSAGE
from righthome.workflow.graph import ConversationWorkflow

from test_workflow import FailingReplyGenerator


@pytest.fixture()
def client():
    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture()
def session_id():
    return f"test-{uuid.uuid4()}"


def _chat(client, session_id, message):
    response = client.post("/chat", json={"session_id": session_id, "message": message})
    assert response.status_code == 200
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"

    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["catalog_loaded"] is True
    assert health["listing_count"] == 20


def test_chat_flow_updates_session(client, session_id):
    first = _chat(client, session_id, "I want to buy a flat in Gurgaon")

    assert first["sessionId"] == session_id
    assert first["updatedStage"] == 2
    assert first["updatedRequirementMap"]["city"] == "Gurgaon"
    assert first["missingFields"] == ["purpose", "budget"]
    assert first["stageInfo"]["title"] == "Your Preferences"
    assert first["suggestions"] == [
        "Tell me more details",
        "Show other options",
        "Schedule a visit",
        "Contact via WhatsApp",
    ]

    second = _chat(client, session_id, "for investment, around 250 lakh")

    assert second["updatedStage"] == 3
    assert second["showRecommendations"] is True
    assert [listing["id"] for listing in second["recommendations"]] == [2]
    assert second["recommendations"][0]["priceUnit"] == "Crore"

    view = client.get(f"/session/{session_id}").json()
    assert view["requirement_map"]["stage"] == 3
    assert view["missing_fields"] == []
    assert {"field": "budget", "label": "Budget Range", "value": "₹250 Lakh"} in view["requirements"]


def test_history_starts_with_welcome(client, session_id):
    _chat(client, session_id, "hello")

    history = client.get(f"/history/{session_id}").json()["history"]

    assert history[0]["content"] == WELCOME_MESSAGE
    assert history[1]["role"] == "user"
    assert history[1]["content"] == "hello"
    assert history[2]["role"] == "assistant"


def test_unknown_session_is_404(client):
    assert client.get("/session/does-not-exist").status_code == 404
    assert client.get("/schedule/does-not-exist").status_code == 404


def test_delete_session(client, session_id):
    _chat(client, session_id, "hello")

    assert client.delete(f"/session/{session_id}").json()["success"] is True
    assert client.get(f"/session/{session_id}").status_code == 404


def test_properties(client):
    listings = client.get("/properties").json()
    assert len(listings) == 20

    dubai = client.get("/properties", params={"city": "dubai"}).json()
    assert [listing["id"] for listing in dubai] == [19, 20]

    detail = client.get("/properties/2").json()
    assert detail["name"]
    assert "moreDetails" in detail

    assert client.get("/properties/999").status_code == 404


def test_schedule_links(client, session_id):
    _chat(client, session_id, "I want to buy a flat in Gurgaon")

    links = client.get(f"/schedule/{session_id}").json()

    assert links["whatsapp"].startswith("https://wa.me/")
    assert links["email"].startswith("mailto:")
    assert "City: Gurgaon" in links["summary"]


def test_generator_failure_answers_with_canned_reply(client, session_id, monkeypatch):
    workflow = ConversationWorkflow(reply_generator=FailingReplyGenerator())
    monkeypatch.setattr(main, "get_workflow", lambda: workflow)

    body = _chat(client, session_id, "I want to buy a flat in Gurgaon")

    assert body["updatedStage"] == 2
    assert "commercial purposes?" in body["response"]


def test_workflow_diagram(client):
    assert "Extractor" in client.get("/workflow/diagram").json()["diagram"]
