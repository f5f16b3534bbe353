"""Key-value store backed by JSON files on the local filesystem."""

from dataclasses import dataclass
from pathlib import Path

from glucose_tracker.domain.errors import StorageReadError
from glucose_tracker.services.storage import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores each key in its own ``<key>.json`` file."""

    directory: Path

    def get(self, key: str) -> str | None:
        """Return the file contents for a key, or None if it was never written."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise StorageReadError(f"Undecodable data in {path.name}") from exc

    def set(self, key: str, value: str) -> None:
        """Write a key's value, creating the directory if needed."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        """Remove a key's file if present."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"
