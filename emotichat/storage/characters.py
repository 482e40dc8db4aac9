"""Character file storage (one JSON file per character)."""

from pathlib import Path
from typing import Any

from .core import characters_dir, file_lock, new_id, now_iso, read_json, write_json
from .migrations import migrate_character


def _character_path(character_id: str) -> Path:
    return characters_dir() / f"{character_id}.json"


def list_characters() -> list[dict[str, Any]]:
    """All characters, newest update first."""
    characters = []
    for path in characters_dir().glob("*.json"):
        char = get_character(path.stem)
        if char is not None:
            characters.append(char)
    characters.sort(key=lambda c: c.get("updated_at", ""), reverse=True)
    return characters


def get_character(character_id: str) -> dict[str, Any] | None:
    """Load a character, upgrading legacy records on first read."""
    path = _character_path(character_id)
    with file_lock(path):
        record = read_json(path)
        if record is None:
            return None
        record, changed = migrate_character(record)
        if changed:
            write_json(path, record)
    return record


def create_character(fields: dict[str, Any]) -> dict[str, Any]:
    """Create a character; legacy-shaped fields are upgraded before saving."""
    now = now_iso()
    record, _ = migrate_character({**fields, "id": new_id(), "created_at": now, "updated_at": now})
    record.setdefault("name", "")
    record.setdefault("description", "")
    record.setdefault("system_prompt", "")
    path = _character_path(record["id"])
    with file_lock(path):
        write_json(path, record)
    return record


def update_character(character_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Overwrite the given top-level fields. Raises KeyError if missing."""
    path = _character_path(character_id)
    with file_lock(path):
        record = read_json(path)
        if record is None:
            raise KeyError(character_id)
        record, _ = migrate_character(record)
        for key, value in fields.items():
            if key in ("id", "created_at"):
                continue
            record[key] = value
        record["updated_at"] = now_iso()
        write_json(path, record)
    return record


def delete_character(character_id: str) -> None:
    path = _character_path(character_id)
    with file_lock(path):
        if not path.is_file():
            raise KeyError(character_id)
        path.unlink()
