"""Prompt presets: built-ins merged with user presets in presets.json.

User presets win on id collision, so saving a built-in id stores an override
that hides the built-in until it is deleted again.
"""

from pathlib import Path
from typing import Any

from emotichat.prompt.presets import BUILT_IN_PRESETS

from .core import data_dir, file_lock, now_iso, read_json, write_json


def _presets_path() -> Path:
    return data_dir() / "presets.json"


def _user_presets() -> list[dict[str, Any]]:
    return read_json(_presets_path(), default=[])


def list_presets() -> list[dict[str, Any]]:
    by_id: dict[str, dict[str, Any]] = {}
    for preset in BUILT_IN_PRESETS:
        by_id[preset.id] = preset.model_dump()
    for preset in _user_presets():
        by_id[preset["id"]] = preset
    return list(by_id.values())


def get_preset(preset_id: str) -> dict[str, Any] | None:
    for preset in list_presets():
        if preset["id"] == preset_id:
            return preset
    return None


def save_preset(preset: dict[str, Any]) -> dict[str, Any]:
    """Create or replace a user preset (never marked built-in)."""
    record = {**preset, "is_built_in": False, "updated_at": now_iso()}
    path = _presets_path()
    with file_lock(path):
        presets = [p for p in read_json(path, default=[]) if p["id"] != record["id"]]
        presets.append(record)
        write_json(path, presets)
    return record


def delete_preset(preset_id: str) -> None:
    """Delete a user preset. Built-ins without an override cannot be deleted."""
    path = _presets_path()
    with file_lock(path):
        presets = read_json(path, default=[])
        remaining = [p for p in presets if p["id"] != preset_id]
        if len(remaining) == len(presets):
            if any(p.id == preset_id for p in BUILT_IN_PRESETS):
                raise PermissionError(f"Preset '{preset_id}' is built in")
            raise KeyError(preset_id)
        write_json(path, remaining)
