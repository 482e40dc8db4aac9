"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, settings), characters, conversations
(plus their message history), presets, and prompt building for a
conversation. Character-owned data is addressed by character id;
conversation-owned data is nested under /api/conversations/{id}/.
"""

from fastapi import APIRouter

from .characters import router as characters_router
from .conversations import router as conversations_router
from .presets import router as presets_router
from .prompt import router as prompt_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(characters_router)
router.include_router(conversations_router)
router.include_router(presets_router)
router.include_router(prompt_router)
