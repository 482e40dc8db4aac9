"""Global app settings (default provider, user name, location, post-processing)."""

from pathlib import Path
from typing import Any

from emotichat.models import PostProcessConfig

from .core import data_dir, file_lock, read_json, write_json

_CONFIG_DEFAULTS: dict[str, Any] = {
    "default_provider": "openai",
    "user_name": "",
    "location": "",
    "active_preset": "",
}


def _config_path() -> Path:
    return data_dir() / "config.json"


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = dict(_CONFIG_DEFAULTS)
    config["post_process"] = PostProcessConfig().model_dump()
    stored = read_json(_config_path(), default={})
    for key in _CONFIG_DEFAULTS:
        if key in stored:
            config[key] = stored[key]
    if isinstance(stored.get("post_process"), dict):
        config["post_process"].update(stored["post_process"])
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config.

    Unknown keys are ignored; post_process is merged key by key and validated.
    """
    path = _config_path()
    with file_lock(path):
        config = get_config()
        for key in _CONFIG_DEFAULTS:
            if key in fields:
                config[key] = fields[key]
        if isinstance(fields.get("post_process"), dict):
            merged = {**config["post_process"], **fields["post_process"]}
            config["post_process"] = PostProcessConfig.model_validate(merged).model_dump()
        write_json(path, config)
    return config
