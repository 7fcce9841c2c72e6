"""Complaint persistence.

Lifecycle code only talks to ``ComplaintRepository``; the JSON-file
implementation keeps one document per complaint, and the in-memory one is
used by tests.
"""

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from src.models.complaint import Complaint

logger = logging.getLogger(__name__)

# Default storage directory
DEFAULT_COMPLAINTS_DIR = Path("data/complaints")


class ComplaintRepository(Protocol):
    """Protocol for storing and retrieving complaints."""

    def get(self, complaint_id: str) -> Complaint | None:
        """Return the complaint, or None if it does not exist."""
        ...

    def save(self, complaint: Complaint) -> None:
        """Insert or replace a complaint."""
        ...

    def list_all(self) -> list[Complaint]:
        """Return every stored complaint."""
        ...


class InMemoryComplaintRepository:
    """Dict-backed repository."""

    def __init__(self, complaints: list[Complaint] | None = None) -> None:
        self._complaints: dict[str, Complaint] = {}
        for complaint in complaints or []:
            self.save(complaint)

    def get(self, complaint_id: str) -> Complaint | None:
        complaint = self._complaints.get(complaint_id)
        return complaint.model_copy() if complaint else None

    def save(self, complaint: Complaint) -> None:
        self._complaints[complaint.complaint_id] = complaint.model_copy()

    def list_all(self) -> list[Complaint]:
        return [c.model_copy() for c in self._complaints.values()]


class FileComplaintRepository:
    """Stores each complaint as ``<complaint_id>.json`` in a directory."""

    def __init__(self, base_path: Path | None = None):
        """Initialize file storage.

        Args:
            base_path: Directory for complaint files.
                Defaults to data/complaints.
        """
        self.base_path = base_path or DEFAULT_COMPLAINTS_DIR
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, complaint_id: str) -> Path:
        return self.base_path / f"{complaint_id}.json"

    def get(self, complaint_id: str) -> Complaint | None:
        file_path = self._path(complaint_id)
        if not file_path.exists():
            return None

        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
            return Complaint.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.error("Failed to load complaint %s: %s", complaint_id, e)
            return None

    def save(self, complaint: Complaint) -> None:
        """Write the complaint via a temporary file that replaces the old one."""
        file_path = self._path(complaint.complaint_id)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.base_path, prefix=f".{file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(complaint.model_dump(mode="json"), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, file_path)
        except OSError as e:
            logger.error("Failed to save complaint %s: %s", complaint.complaint_id, e)
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise

    def list_all(self) -> list[Complaint]:
        complaints: list[Complaint] = []
        for file_path in sorted(self.base_path.glob("*.json")):
            try:
                with open(file_path, encoding="utf-8") as f:
                    data = json.load(f)
                complaints.append(Complaint.model_validate(data))
            except (OSError, json.JSONDecodeError, ValueError) as e:
                logger.warning("Failed to read complaint file %s: %s", file_path, e)
                continue
        return complaints
