from __future__ import annotations

from threading import Lock
from typing import Any, Set
from uuid import uuid4


class KeyStore:
    """In-memory set of issued API keys; lives as long as the process."""

    def __init__(self) -> None:
        self._keys: Set[str] = set()
        self._lock = Lock()

    def issue(self) -> str:
        key = str(uuid4())
        with self._lock:
            self._keys.add(key)
        return key

    def validate(self, token: Any) -> bool:
        if not isinstance(token, str) or not token:
            return False
        with self._lock:
            return token in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)
