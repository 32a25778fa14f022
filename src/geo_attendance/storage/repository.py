from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Sequence, Tuple


class KeyValueStorage(Protocol):
    """Async persistent key/value storage owned by the platform.

    Note (DIP): session code depends on this interface, not on a concrete store.
    """

    async def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove_item(self, key: str) -> None:
        raise NotImplementedError

    async def multi_get(self, keys: Sequence[str]) -> Dict[str, Optional[str]]:
        raise NotImplementedError

    async def multi_set(self, pairs: Iterable[Tuple[str, str]]) -> None:
        raise NotImplementedError

    async def multi_remove(self, keys: Sequence[str]) -> None:
        raise NotImplementedError
