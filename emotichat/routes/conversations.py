"""Conversation CRUD and message history endpoints."""

from fastapi import APIRouter, HTTPException

from emotichat import storage

from .models import CreateConversation, NewMessage, UpdateConversation

router = APIRouter()


def _require_conversation(conversation_id: str) -> dict:
    conv = storage.get_conversation(conversation_id)
    if not conv:
        raise HTTPException(404, "Conversation not found")
    return conv


@router.get("/conversations")
async def list_conversations(character_id: str | None = None):
    """List conversations, optionally for one character."""
    return storage.list_conversations(character_id)


@router.post("/conversations", status_code=201)
async def create_conversation(body: CreateConversation):
    """Start a conversation; the character's opening message becomes turn 0."""
    char = storage.get_character(body.character_id)
    if not char:
        raise HTTPException(404, "Character not found")
    conv = storage.create_conversation(body.character_id, body.title or char["name"])
    opening = char.get("prompt_config", {}).get("opening_message", "")
    if opening:
        storage.append_messages(conv["id"], [{"role": "assistant", "content": opening}])
    return conv


@router.get("/conversations/{conversation_id}")
async def get_conversation(conversation_id: str):
    return _require_conversation(conversation_id)


@router.patch("/conversations/{conversation_id}")
async def update_conversation(conversation_id: str, body: UpdateConversation):
    """Update title or conversation-level prompt config (merged key by key)."""
    _require_conversation(conversation_id)
    return storage.update_conversation(conversation_id, body.model_dump(exclude_none=True))


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(conversation_id: str):
    """Delete a conversation and its messages."""
    try:
        storage.delete_conversation(conversation_id)
    except KeyError:
        raise HTTPException(404, "Conversation not found")
    return {"ok": True}


@router.get("/conversations/{conversation_id}/messages")
async def get_messages(conversation_id: str):
    _require_conversation(conversation_id)
    return storage.get_messages(conversation_id)


@router.post("/conversations/{conversation_id}/messages", status_code=201)
async def add_message(conversation_id: str, body: NewMessage):
    """Append one message and return the full history."""
    _require_conversation(conversation_id)
    return storage.append_messages(conversation_id, [body.model_dump()])


@router.delete("/conversations/{conversation_id}/messages/{index}")
async def delete_message(conversation_id: str, index: int):
    """Delete a message by index. Returns the remaining history."""
    _require_conversation(conversation_id)
    try:
        return storage.delete_message(conversation_id, index)
    except IndexError as e:
        raise HTTPException(404, str(e))
