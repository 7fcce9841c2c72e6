"""Durable key-value stores backing the reminder ledger.

The ledger only needs get/set/delete on string keys holding JSON-compatible
values, so any backend that satisfies ``KeyValueStore`` can be swapped in
(an in-memory dict for tests, a JSON file on disk for the CLI).
"""

import contextlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Default storage file
DEFAULT_LEDGER_FILE = Path("data/reminders.json")


class KeyValueStore(Protocol):
    """Protocol for the durable store behind the reminder ledger."""

    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...


class InMemoryStore:
    """Dict-backed store. Values are copied through JSON on the way in."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Return all stored keys."""
        return list(self._data)


class JsonFileStore:
    """Single JSON document on disk, rewritten on every mutation.

    Writes go to a temporary file in the same directory which then
    replaces the original, so a failed write never leaves a half-written
    document behind. A document that cannot be parsed is never
    overwritten. A lock serializes writers within one process.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_LEDGER_FILE
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _read_all(self, strict: bool = False) -> dict[str, Any]:
        """Load the whole document.

        Reads treat an unreadable document as empty. Writers pass
        ``strict=True`` so that a rewrite never replaces a document it
        could not parse; a ``ValueError`` is raised instead.
        """
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            if strict:
                logger.error("Refusing to rewrite unreadable ledger file %s", self.path)
                raise
            logger.warning("Ignoring unreadable ledger file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            if strict:
                logger.error("Refusing to rewrite ledger file %s", self.path)
                raise ValueError(f"ledger file {self.path} is not a JSON object")
            logger.warning("Ignoring ledger file %s: not a JSON object", self.path)
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("Failed to write ledger file %s: %s", self.path, e)
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all(strict=True)
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all(strict=True)
            if key not in data:
                return
            del data[key]
            self._write_all(data)

    def keys(self) -> list[str]:
        """Return all stored keys."""
        return list(self._read_all())
