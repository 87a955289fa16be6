"""JSON-file key/value storage for device-local state (identity, theme)."""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from wall_client.errors import PersistenceUnavailable
from wall_client.logging_setup import get_logger

log = get_logger(__name__)


class LocalStorage:
    """Small string key/value store persisted as one JSON object on disk.

    A missing file reads as empty. A file that is not valid JSON also reads
    as empty and is overwritten on the next write. Any other I/O failure
    raises PersistenceUnavailable.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            log.warning("local_storage_corrupt", path=str(self.path))
            return {}
        except OSError as e:
            raise PersistenceUnavailable(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: dict[str, str]) -> None:
        # Write to a sibling temp file and rename so a reader never sees half
        # of an update.
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise PersistenceUnavailable(f"cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def get_many(self, *keys: str) -> dict[str, Optional[str]]:
        data = self._read()
        return {key: data.get(key) for key in keys}

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, str]) -> None:
        """Persist several keys in a single write."""
        data = self._read()
        data.update(values)
        self._write(data)

    def remove(self, *keys: str) -> None:
        data = self._read()
        for key in keys:
            data.pop(key, None)
        self._write(data)
