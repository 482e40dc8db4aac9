"""One-time upgrade of legacy character records to the current shape.

Older records were written with camelCase keys and carried the whole prompt in
a single system prompt field. Reads pass through migrate_character; the
storage layer writes the result back once so the upgrade is not repeated.
"""

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)

_RENAMED_KEYS = {
    "systemPrompt": "system_prompt",
    "promptConfig": "prompt_config",
    "openingMessage": "opening_message",
}


def migrate_character(record: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Return (migrated record, whether anything changed). Idempotent."""
    migrated = copy.deepcopy(record)
    changed = False

    for old, new in _RENAMED_KEYS.items():
        if old in migrated:
            value = migrated.pop(old)
            migrated.setdefault(new, value)
            changed = True

    config = migrated.get("prompt_config")
    if not isinstance(config, dict):
        config = {}
        migrated["prompt_config"] = config
        changed = True
    for old, new in _RENAMED_KEYS.items():
        if old in config:
            config.setdefault(new, config.pop(old))
            changed = True
    if "opening_message" in migrated:
        config.setdefault("opening_message", migrated.pop("opening_message"))
        changed = True
    config.setdefault("opening_message", "")
    prompts = config.setdefault("prompts", [])

    legacy = migrated.get("system_prompt") or ""
    if legacy and not prompts:
        prompts.append({
            "id": f"migrated-system-{migrated.get('id', '')}",
            "order": 0,
            "content": legacy,
            "enabled": True,
            "role": "system",
            "name": "System Prompt",
        })
        migrated["system_prompt"] = ""
        changed = True
        logger.info(f"Migrated legacy system prompt for character {migrated.get('id')}")

    return migrated, changed
