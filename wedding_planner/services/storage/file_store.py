"""
Local File Storage Implementation

DESIGN DECISION: Each key is one UTF-8 file in a data directory.
This mirrors the flat key-value area a phone app would use:
1. No database setup required
2. The user can open and back up their lists by hand
3. A key is replaced whole, never patched

Writes go to a temporary file in the same directory which is then
renamed over the target, so a crash never leaves half a list behind.
"""

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from wedding_planner.services.storage.interface import (
    KeyValueReadError,
    KeyValueStore,
    KeyValueWriteError,
    validate_key,
)


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed key-value store.

    Values are stored in `<data_dir>/<key>.json`.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Union[str, Path], fsync: bool = True):
        self._data_dir = Path(data_dir)
        self._fsync = fsync

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{validate_key(key)}{self.SUFFIX}"

    async def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        return await asyncio.to_thread(self._read, path)

    async def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        await asyncio.to_thread(self._write, path, value)

    async def remove_item(self, key: str) -> bool:
        path = self.path_for(key)
        return await asyncio.to_thread(self._remove, path)

    def _read(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise KeyValueReadError(f"Failed to read {path.name}: {e}") from e

    def _write(self, path: Path, value: str) -> None:
        temp_name: Optional[str] = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._data_dir,
                prefix=f"{path.name}-",
                suffix=".tmp",
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(value)
                tf.flush()
                if self._fsync:
                    os.fsync(tf.fileno())
            os.replace(temp_name, path)
        except OSError as e:
            if temp_name:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)
            raise KeyValueWriteError(f"Failed to write {path.name}: {e}") from e

    def _remove(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise KeyValueWriteError(f"Failed to remove {path.name}: {e}") from e
