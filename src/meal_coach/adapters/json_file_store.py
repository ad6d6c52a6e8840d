"""JSON file-backed document store."""

import json
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path

from meal_coach.domain.subscriptions import Subscription
from meal_coach.services.storage import DocumentStore

_SUBSCRIPTIONS_FILE = "subscriptions.json"


@dataclass
class JsonFileDocumentStore(DocumentStore):
    """Stores each document as a JSON file under a data directory.

    Keys map to paths by their ``:`` separated parts, so ``logs:2024-05-01``
    lives at ``logs/2024-05-01.json``. Writes replace files atomically.
    """

    root: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def create(cls, data_dir: str) -> "JsonFileDocumentStore":
        """Create a store rooted at data_dir, creating it if needed."""
        root = Path(data_dir)
        root.mkdir(parents=True, exist_ok=True)
        return cls(root=root)

    def get(self, key: str) -> dict[str, object] | None:
        """Return the document for key, or None if it doesn't exist."""
        return self._read(self._path_for(key))

    def set(self, key: str, value: dict[str, object]) -> None:
        """Replace the document for key."""
        with self._lock:
            self._write(self._path_for(key), value)

    def list_subscriptions(self) -> list[Subscription]:
        """Return subscriptions in registration order."""
        records = self._read(self.root / _SUBSCRIPTIONS_FILE) or {}
        return [
            Subscription(id=sub_id, endpoint=str(info["endpoint"]), info=info)
            for sub_id, info in records.items()
            if isinstance(info, dict) and info.get("endpoint")
        ]

    def save_subscription(self, subscription: Subscription) -> None:
        """Insert or replace a subscription record."""
        path = self.root / _SUBSCRIPTIONS_FILE
        with self._lock:
            records = self._read(path) or {}
            records[subscription.id] = subscription.info
            self._write(path, records)

    def delete_subscription(self, subscription_id: str) -> None:
        """Remove a subscription record if present."""
        path = self.root / _SUBSCRIPTIONS_FILE
        with self._lock:
            records = self._read(path) or {}
            if records.pop(subscription_id, None) is not None:
                self._write(path, records)

    def _path_for(self, key: str) -> Path:
        parts = [part for part in key.split(":") if part]
        if not parts or any(part in {".", ".."} or "/" in part for part in parts):
            raise ValueError(f"Invalid document key: {key!r}")
        *dirs, name = parts
        return self.root.joinpath(*dirs, f"{name}.json")

    @staticmethod
    def _read(path: Path) -> dict[str, object] | None:
        try:
            with path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _write(path: Path, value: dict[str, object]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
