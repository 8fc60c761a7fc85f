"""JSON file key-value store."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from macro_budget.services.tracker import KeyValueStore


@dataclass
class JsonFileStore(KeyValueStore):
    """Stores each record as ``<key>.json`` inside a data directory."""

    data_dir: Path

    def get(self, key: str) -> object | None:
        """Return the decoded record for a key, or None if it does not exist."""
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def set(self, key: str, value: object) -> None:
        """Write a record atomically, replacing any previous version."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.data_dir, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        """Delete the record for a key if present."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not key or Path(key).name != key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"
