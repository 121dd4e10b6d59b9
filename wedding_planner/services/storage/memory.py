"""In-memory key-value store, used by tests and throwaway sessions."""

from typing import Optional

from wedding_planner.services.storage.interface import KeyValueStore, validate_key


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store with the same key rules as the file store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[validate_key(key)] = value

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(validate_key(key))

    async def set_item(self, key: str, value: str) -> None:
        self._data[validate_key(key)] = value

    async def remove_item(self, key: str) -> bool:
        return self._data.pop(validate_key(key), None) is not None

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored, for assertions."""
        return dict(self._data)
