"""JSON file implementation of the key-value store."""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

from daily_cigs.domain.errors import StorageReadError, StorageWriteError
from daily_cigs.services.event_store import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores every key as a string member of one JSON object on disk.

    Writes go to a temp file in the same directory, are fsynced and then
    replace the target, so readers never see a partial file. A corrupt file
    is backed up next to the original and treated as empty.
    """

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the stored value for the key."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value and flush it to disk."""
        data = self._load_for_write()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        """Delete a key and flush the change to disk."""
        data = self._load_for_write()
        if key not in data:
            return
        del data[key]
        self._save(data)

    def _load(self) -> dict[str, object]:
        path = Path(self.path)
        if not path.exists():
            return {}
        try:
            text = path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise StorageReadError(f"Failed to read {path}") from exc
        if not text:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            self._reset_corrupt(path, text)
            return {}
        return data

    def _reset_corrupt(self, path: Path, text: str) -> None:
        backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
        _logger.warning("Corrupt store file %s; backing up to %s", path, backup)
        try:
            backup.write_text(text, encoding="utf-8")
            self._save({})
        except (OSError, StorageWriteError) as exc:
            raise StorageReadError(f"Failed to reset corrupt {path}") from exc

    def _load_for_write(self) -> dict[str, object]:
        try:
            return self._load()
        except StorageReadError as exc:
            raise StorageWriteError(f"Failed to read {self.path} before write") from exc

    def _save(self, data: dict[str, object]) -> None:
        path = Path(self.path)
        tmp = path.with_name(path.name + ".tmp")
        payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageWriteError(f"Failed to write {path}") from exc

        try:
            os.chmod(path, 0o600)
        except OSError:
            _logger.debug("Could not restrict permissions on %s", path)
