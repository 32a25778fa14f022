from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Tuple

from .repository import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """Process-local storage; the session is lost when the app exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def multi_get(self, keys: Sequence[str]) -> Dict[str, Optional[str]]:
        return {k: self._data.get(k) for k in keys}

    async def multi_set(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for k, v in pairs:
            self._data[k] = str(v)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        for k in keys:
            self._data.pop(k, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)
