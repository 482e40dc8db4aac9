"""Storage initialization, path helpers, JSON I/O and per-file locks."""

import json
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_data_dir: Path | None = None
_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    characters_dir().mkdir(exist_ok=True)
    conversations_dir().mkdir(exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def characters_dir() -> Path:
    return data_dir() / "characters"


def conversations_dir() -> Path:
    return data_dir() / "conversations"


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def read_json(path: Path, default: Any = None) -> Any:
    """Load a JSON file, or return default if it does not exist."""
    if not path.is_file():
        return default
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


@contextmanager
def file_lock(path: Path) -> Iterator[None]:
    """Serialize read-modify-write sequences on one file."""
    key = path.resolve()
    with _locks_guard:
        lock = _locks.setdefault(key, threading.Lock())
    with lock:
        yield
