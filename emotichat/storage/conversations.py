"""Conversation records and their append-only message logs."""

import shutil
from pathlib import Path
from typing import Any

from .core import conversations_dir, file_lock, new_id, now_iso, read_json, write_json


def _conversation_path(conversation_id: str) -> Path:
    return conversations_dir() / f"{conversation_id}.json"


def _messages_path(conversation_id: str) -> Path:
    return conversations_dir() / conversation_id / "messages.json"


def list_conversations(character_id: str | None = None) -> list[dict[str, Any]]:
    """All conversations, optionally for one character, newest update first."""
    conversations = []
    for path in conversations_dir().glob("*.json"):
        conv = read_json(path)
        if character_id is None or conv.get("character_id") == character_id:
            conversations.append(conv)
    conversations.sort(key=lambda c: c.get("updated_at", ""), reverse=True)
    return conversations


def get_conversation(conversation_id: str) -> dict[str, Any] | None:
    return read_json(_conversation_path(conversation_id))


def create_conversation(character_id: str, title: str = "", prompt_config: dict | None = None) -> dict[str, Any]:
    now = now_iso()
    record = {
        "id": new_id(),
        "character_id": character_id,
        "title": title,
        "prompt_config": {"main_prompt": None, "prompts": [], "variables": {}, **(prompt_config or {})},
        "created_at": now,
        "updated_at": now,
    }
    path = _conversation_path(record["id"])
    with file_lock(path):
        write_json(path, record)
    return record


def update_conversation(conversation_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Overwrite top-level fields; prompt_config is merged key by key."""
    path = _conversation_path(conversation_id)
    with file_lock(path):
        record = read_json(path)
        if record is None:
            raise KeyError(conversation_id)
        for key, value in fields.items():
            if key in ("id", "created_at"):
                continue
            if key == "prompt_config" and isinstance(value, dict):
                record.setdefault("prompt_config", {}).update(value)
            else:
                record[key] = value
        record["updated_at"] = now_iso()
        write_json(path, record)
    return record


def save_variables(conversation_id: str, variables: dict[str, str]) -> dict[str, Any]:
    """Persist the macro store returned by a prompt build."""
    return update_conversation(conversation_id, {"prompt_config": {"variables": dict(variables)}})


def delete_conversation(conversation_id: str) -> None:
    path = _conversation_path(conversation_id)
    with file_lock(path):
        if not path.is_file():
            raise KeyError(conversation_id)
        path.unlink()
        child_dir = conversations_dir() / conversation_id
        if child_dir.is_dir():
            shutil.rmtree(child_dir)


def get_messages(conversation_id: str) -> list[dict[str, Any]]:
    """Load a conversation's history. Returns [] if none exist."""
    return read_json(_messages_path(conversation_id), default=[])


def append_messages(conversation_id: str, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Append messages (stamping id/ts where missing) and return the full log."""
    path = _messages_path(conversation_id)
    with file_lock(path):
        existing = read_json(path, default=[])
        for msg in messages:
            existing.append({"id": new_id(), "ts": now_iso(), **msg})
        write_json(path, existing)
    update_conversation(conversation_id, {})
    return existing


def delete_message(conversation_id: str, index: int) -> list[dict[str, Any]]:
    """Delete a message by index. Returns updated message list."""
    path = _messages_path(conversation_id)
    with file_lock(path):
        messages = read_json(path, default=[])
        if index < 0 or index >= len(messages):
            raise IndexError(f"Message index {index} out of range")
        messages.pop(index)
        write_json(path, messages)
    return messages
