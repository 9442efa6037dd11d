"""Local durable key-value store for dayplan.

Values are kept the way a browser's localStorage keeps them: every key maps
to the JSON text of its value. ``read`` never raises (a missing key or a
payload that fails to parse yields the caller's default) and ``write`` never
raises (failures are logged and discarded).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Generic, TypeVar

from dayplan.fileio import file_lock, read_text, write_text_atomic

log = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(Exception):
    """A value could not be stored."""


class QuotaExceededError(StoreError):
    """Storing a value would push the store past its size quota."""


class MemoryStore:
    """In-process store with the same read/write contract as LocalStore."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    # ── raw string access ──────────────────────────────────────

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, payload: str) -> None:
        self._apply(key, payload)

    def remove(self, key: str) -> None:
        try:
            self._apply(key, None)
        except (StoreError, OSError) as e:
            log.warning("Could not remove %r from store: %s", key, e)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._items if k.startswith(prefix))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def _check_quota(self, items: dict[str, str]) -> None:
        if self.quota_bytes is None:
            return
        size = len(_encode(items).encode("utf-8"))
        if size > self.quota_bytes:
            raise QuotaExceededError(f"store would be {size} bytes, quota is {self.quota_bytes}")

    def _apply(self, key: str, payload: str | None, only_if_absent: bool = False) -> None:
        """Set (or, with payload None, delete) one key."""
        items = _merge(self._items, key, payload, only_if_absent)
        self._check_quota(items)
        self._items = items

    # ── JSON value access ──────────────────────────────────────

    def read(self, key: str, default: Any = None) -> Any:
        """Return the stored value for *key*, or *default* if absent or unparsable."""
        payload = self.get_item(key)
        if not payload:
            return default
        try:
            return json.loads(payload)
        except ValueError:
            log.warning("Discarding unparsable value for %r", key)
            return default

    def write(self, key: str, value: Any) -> bool:
        """Serialize and store *value*. Returns False if the write was discarded."""
        try:
            payload = json.dumps(value, ensure_ascii=False)
            self.set_item(key, payload)
        except (TypeError, ValueError, StoreError, OSError) as e:
            log.warning("Discarding write to %r: %s", key, e)
            return False
        return True

    def write_default(self, key: str, value: Any) -> bool:
        """Store *value* only if *key* has no value yet. Failures are discarded like write()."""
        if key in self:
            return True
        try:
            self._apply(key, json.dumps(value, ensure_ascii=False), only_if_absent=True)
        except (TypeError, ValueError, StoreError, OSError) as e:
            log.warning("Discarding default for %r: %s", key, e)
            return False
        return True


class LocalStore(MemoryStore):
    """Key-value store persisted as a single JSON file.

    The file is loaded when the store is opened. Each write takes an
    exclusive lock on a sidecar ``.lock`` file, re-reads the store file,
    changes only its own key and rewrites the file atomically before
    returning. Writers on the same file therefore conflict per key (last
    write to a key wins), never per file.
    """

    def __init__(self, path: Path, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes=quota_bytes)
        self.path = path
        self.lock_path = path.with_name(path.name + ".lock")
        self._items = self._load()

    def _load(self) -> dict[str, str]:
        try:
            text = read_text(self.path)
        except OSError as e:
            log.warning("Could not read store %s: %s", self.path, e)
            return {}
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError:
            log.warning("Store %s is corrupt; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            log.warning("Store %s is not a JSON object; starting empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def reload(self) -> None:
        """Re-read the file, picking up writes from other processes."""
        self._items = self._load()

    def _apply(self, key: str, payload: str | None, only_if_absent: bool = False) -> None:
        with file_lock(self.lock_path):
            current = self._load()
            items = _merge(current, key, payload, only_if_absent)
            if items != current:
                self._check_quota(items)
                write_text_atomic(self.path, _encode(items))
        self._items = items


def _merge(items: dict[str, str], key: str, payload: str | None, only_if_absent: bool = False) -> dict[str, str]:
    merged = dict(items)
    if payload is None:
        merged.pop(key, None)
    elif not (only_if_absent and key in merged):
        merged[key] = payload
    return merged


def _encode(items: dict[str, str]) -> str:
    return json.dumps(items, indent=2, ensure_ascii=False, sort_keys=True) + "\n"


class Cell(Generic[T]):
    """A single key bound to a default value."""

    def __init__(self, store: MemoryStore, key: str, default: T) -> None:
        self.store = store
        self.key = key
        self.default = default

    def get(self) -> T:
        return self.store.read(self.key, self.default)

    def set(self, value: T) -> bool:
        return self.store.write(self.key, value)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Cell({self.key!r})"
