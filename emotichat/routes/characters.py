"""Character CRUD endpoints."""

from fastapi import APIRouter, HTTPException

from emotichat import storage

from .models import CreateCharacter, UpdateCharacter

router = APIRouter()


@router.get("/characters")
async def list_characters():
    """List all characters."""
    return storage.list_characters()


@router.post("/characters", status_code=201)
async def create_character(body: CreateCharacter):
    """Create a new character."""
    if not body.name.strip():
        raise HTTPException(422, "Character name is required")
    return storage.create_character(body.model_dump())


@router.get("/characters/{character_id}")
async def get_character(character_id: str):
    """Get a single character by id."""
    char = storage.get_character(character_id)
    if not char:
        raise HTTPException(404, "Character not found")
    return char


@router.patch("/characters/{character_id}")
async def update_character(character_id: str, body: UpdateCharacter):
    """Update name, description, legacy system prompt or prompt config."""
    try:
        return storage.update_character(character_id, body.model_dump(exclude_none=True))
    except KeyError:
        raise HTTPException(404, "Character not found")


@router.delete("/characters/{character_id}")
async def delete_character(character_id: str):
    """Delete a character. Its conversations are kept."""
    try:
        storage.delete_character(character_id)
    except KeyError:
        raise HTTPException(404, "Character not found")
    return {"ok": True}
