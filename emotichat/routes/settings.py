"""Health check and settings endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from emotichat import storage

from .models import SettingsPatch

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get global app settings."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: SettingsPatch):
    """Update global app settings (partial merge)."""
    try:
        return storage.update_config(body.model_dump(exclude_none=True))
    except ValidationError as e:
        raise HTTPException(422, f"Invalid post-process settings: {e.errors()[0]['msg']}")
