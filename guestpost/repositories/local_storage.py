"""JSON accessor over a key-value store."""

from __future__ import annotations

import copy
import json
from typing import Any

from .kv_store import KeyValueStore, StorageCorruptedError


class LocalStorage:
    """
    Reads and writes JSON documents under fixed keys.

    Absent keys yield a copy of ``default``; malformed documents raise
    ``StorageCorruptedError`` instead of being silently replaced.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageCorruptedError(key, exc.msg) from exc

    def set_json(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value, ensure_ascii=False))

    def remove(self, key: str) -> None:
        self.store.remove(key)
