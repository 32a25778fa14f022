from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .repository import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Key/value storage persisted as one JSON object on disk.

    Each write replaces the whole file via a temp file + rename.
    """

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("session file %s unreadable, starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)

    async def get_item(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await self.multi_set([(key, value)])

    async def remove_item(self, key: str) -> None:
        await self.multi_remove([key])

    async def multi_get(self, keys: Sequence[str]) -> Dict[str, Optional[str]]:
        data = await asyncio.to_thread(self._read)
        return {k: data.get(k) for k in keys}

    async def multi_set(self, pairs: Iterable[Tuple[str, str]]) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            for k, v in pairs:
                data[k] = str(v)
            await asyncio.to_thread(self._write, data)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            for k in keys:
                data.pop(k, None)
            await asyncio.to_thread(self._write, data)
