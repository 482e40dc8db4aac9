"""HTTP API tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from conftest import TEST_DATA_DIR
from emotichat.app import create_app


@pytest.fixture
def client():
    return TestClient(create_app(TEST_DATA_DIR))


def _character(client, **fields):
    fields.setdefault("name", "Aria")
    resp = client.post("/api/characters", json=fields)
    assert resp.status_code == 201
    return resp.json()


def _conversation(client, character_id, **fields):
    resp = client.post("/api/conversations", json={"character_id": character_id, **fields})
    assert resp.status_code == 201
    return resp.json()


# ── settings ────────────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_settings_patch(client):
    resp = client.patch("/api/settings", json={"user_name": "Alice", "post_process": {"enable_merging": True}})
    assert resp.status_code == 200
    body = client.get("/api/settings").json()
    assert body["user_name"] == "Alice"
    assert body["post_process"]["enable_merging"] is True


def test_settings_invalid_post_process(client):
    resp = client.patch("/api/settings", json={"post_process": {"length_exceeded_strategy": "explode"}})
    assert resp.status_code == 422


# ── characters ──────────────────────────────────────────


def test_character_crud(client):
    char = _character(client, description="Stargazer")
    assert client.get(f"/api/characters/{char['id']}").json()["description"] == "Stargazer"
    resp = client.patch(f"/api/characters/{char['id']}", json={"name": "Aria II"})
    assert resp.json()["name"] == "Aria II"
    assert len(client.get("/api/characters").json()) == 1
    assert client.delete(f"/api/characters/{char['id']}").json() == {"ok": True}
    assert client.get(f"/api/characters/{char['id']}").status_code == 404


def test_character_name_required(client):
    assert client.post("/api/characters", json={"name": "  "}).status_code == 422


def test_unknown_character_404(client):
    assert client.patch("/api/characters/nope", json={"name": "x"}).status_code == 404
    assert client.delete("/api/characters/nope").status_code == 404


# ── conversations ───────────────────────────────────────


def test_conversation_starts_with_opening_message(client):
    char = _character(client, prompt_config={"opening_message": "Welcome!", "prompts": []})
    conv = _conversation(client, char["id"])
    assert conv["title"] == "Aria"
    messages = client.get(f"/api/conversations/{conv['id']}/messages").json()
    assert [(m["role"], m["content"]) for m in messages] == [("assistant", "Welcome!")]


def test_conversation_for_unknown_character(client):
    resp = client.post("/api/conversations", json={"character_id": "nope"})
    assert resp.status_code == 404


def test_messages_add_and_delete(client):
    conv = _conversation(client, _character(client)["id"])
    url = f"/api/conversations/{conv['id']}/messages"
    resp = client.post(url, json={"role": "user", "content": "hi"})
    assert resp.status_code == 201
    assert [m["content"] for m in resp.json()] == ["hi"]
    assert client.delete(f"{url}/0").json() == []
    assert client.delete(f"{url}/0").status_code == 404


def test_conversation_prompt_config_patch(client):
    conv = _conversation(client, _character(client)["id"])
    resp = client.patch(
        f"/api/conversations/{conv['id']}",
        json={"prompt_config": {"main_prompt": "Be brief."}},
    )
    assert resp.json()["prompt_config"]["main_prompt"] == "Be brief."
    assert client.delete(f"/api/conversations/{conv['id']}").json() == {"ok": True}
    assert client.get(f"/api/conversations/{conv['id']}").status_code == 404


# ── presets ─────────────────────────────────────────────


def test_presets(client):
    ids = [p["id"] for p in client.get("/api/presets").json()]
    assert "preset-default" in ids
    resp = client.put("/api/presets/mine", json={"name": "Mine"})
    assert resp.json()["id"] == "mine"
    assert client.get("/api/presets/mine").json()["name"] == "Mine"
    assert client.delete("/api/presets/preset-default").status_code == 403
    assert client.delete("/api/presets/mine").json() == {"ok": True}
    assert client.get("/api/presets/mine").status_code == 404


# ── prompt building ─────────────────────────────────────


def _prompt_setup(client):
    char = _character(client, prompt_config={
        "opening_message": "",
        "prompts": [
            {"id": "p", "order": 0, "content": "You are {{char}}. {{setvar::mood::calm}}"},
            {"id": "q", "order": 1, "content": "Talking to {{user}} in {{location}}."},
        ],
    })
    conv = _conversation(client, char["id"])
    client.post(f"/api/conversations/{conv['id']}/messages", json={"role": "user", "content": "hi"})
    return conv


def test_build_prompt_openai(client):
    client.patch("/api/settings", json={"user_name": "Alice", "location": "Paris"})
    conv = _prompt_setup(client)
    resp = client.post(f"/api/conversations/{conv['id']}/prompt", json={})
    assert resp.status_code == 200
    body = resp.json()
    assert body["provider"] == "openai"
    assert [m["content"] for m in body["messages"]] == [
        "You are Aria.", "Talking to Alice in Paris.", "hi",
    ]
    assert "system_instruction" not in body
    assert body["updated_variables"] == {"mood": "calm"}
    stored = client.get(f"/api/conversations/{conv['id']}").json()
    assert stored["prompt_config"]["variables"] == {"mood": "calm"}


def test_build_prompt_without_persisting_variables(client):
    conv = _prompt_setup(client)
    client.post(f"/api/conversations/{conv['id']}/prompt", json={"persist_variables": False})
    stored = client.get(f"/api/conversations/{conv['id']}").json()
    assert stored["prompt_config"]["variables"] == {}


def test_build_prompt_gemini_splits_system_instruction(client):
    conv = _prompt_setup(client)
    body = client.post(
        f"/api/conversations/{conv['id']}/prompt",
        json={"provider": "gemini-1.5-pro", "user_name": "Bo", "extra_variables": {"location": "Oslo"}},
    ).json()
    assert body["provider"] == "gemini"
    assert body["system_instruction"] == "You are Aria.\n\nTalking to Bo in Oslo."
    assert [(m["content"], m["adapted_role"]) for m in body["messages"]] == [("hi", "user")]


def test_build_prompt_length_error(client):
    conv = _prompt_setup(client)
    resp = client.post(
        f"/api/conversations/{conv['id']}/prompt",
        json={"post_process_config": {"max_message_length": 5, "length_exceeded_strategy": "error"}},
    )
    assert resp.status_code == 422


def test_build_prompt_unknown_preset(client):
    conv = _prompt_setup(client)
    resp = client.post(f"/api/conversations/{conv['id']}/prompt", json={"preset_id": "nope"})
    assert resp.status_code == 404


def test_build_prompt_unknown_conversation(client):
    assert client.post("/api/conversations/nope/prompt", json={}).status_code == 404
