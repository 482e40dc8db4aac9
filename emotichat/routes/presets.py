"""Prompt preset endpoints."""

from fastapi import APIRouter, HTTPException

from emotichat import storage

from .models import SavePreset

router = APIRouter()


@router.get("/presets")
async def list_presets():
    """List built-in and user presets (user overrides win)."""
    return storage.list_presets()


@router.get("/presets/{preset_id}")
async def get_preset(preset_id: str):
    preset = storage.get_preset(preset_id)
    if not preset:
        raise HTTPException(404, "Preset not found")
    return preset


@router.put("/presets/{preset_id}")
async def save_preset(preset_id: str, body: SavePreset):
    """Create or replace a user preset."""
    return storage.save_preset({"id": preset_id, **body.model_dump()})


@router.delete("/presets/{preset_id}")
async def delete_preset(preset_id: str):
    try:
        storage.delete_preset(preset_id)
    except PermissionError as e:
        raise HTTPException(403, str(e))
    except KeyError:
        raise HTTPException(404, "Preset not found")
    return {"ok": True}
