"""
ScriptForge Revision Storage

Persistence backends for revision history. The revision store is storage
agnostic: it loads the full history once and hands the whole list back after
every transaction.

Backends:
1. InMemoryRevisionBackend - process-local, used by default and in tests
2. JsonFileRevisionBackend - a single JSON manifest on disk
"""

import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from scriptforge.core.exceptions import SerializationError
from scriptforge.core.id_system import format_revision_number, parse_revision_number
from scriptforge.core.logging_config import get_logger

logger = get_logger("revisions.storage")


@dataclass(frozen=True)
class RevisionSnapshot:
    """Immutable capture of a serialized document at one point in history."""
    id: str
    sequence_number: int
    content: str
    notes: str
    created_at: datetime
    is_current: bool = False

    @property
    def revision_number(self) -> str:
        return format_revision_number(self.sequence_number)

    def with_current(self, is_current: bool) -> "RevisionSnapshot":
        return self if self.is_current == is_current else replace(self, is_current=is_current)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["revision_number"] = self.revision_number
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RevisionSnapshot":
        """Create from dict; accepts records that only carry ``revision_number``."""
        sequence_number = data.get("sequence_number")
        if sequence_number is None:
            sequence_number = parse_revision_number(data.get("revision_number", ""))
        if sequence_number is None:
            raise SerializationError("Snapshot record has no sequence number", {"id": data.get("id")})

        created = data.get("created_at") or data.get("created_date")
        return cls(
            id=data["id"],
            sequence_number=int(sequence_number),
            content=data.get("content", ""),
            notes=data.get("notes", ""),
            created_at=datetime.fromisoformat(created) if created else datetime.now(),
            is_current=bool(data.get("is_current", False)),
        )


class RevisionBackend(ABC):
    """Where a document's revision history lives."""

    @abstractmethod
    def load(self) -> List[RevisionSnapshot]:
        """Return the stored history (any order)."""

    @abstractmethod
    def save(self, snapshots: List[RevisionSnapshot]) -> None:
        """Replace the stored history."""


class InMemoryRevisionBackend(RevisionBackend):
    """Keeps history in process memory."""

    def __init__(self, snapshots: Optional[List[RevisionSnapshot]] = None):
        self._snapshots: List[RevisionSnapshot] = list(snapshots or [])
        self.save_count = 0

    def load(self) -> List[RevisionSnapshot]:
        return list(self._snapshots)

    def save(self, snapshots: List[RevisionSnapshot]) -> None:
        self._snapshots = list(snapshots)
        self.save_count += 1


class JsonFileRevisionBackend(RevisionBackend):
    """Stores history as a JSON manifest file."""

    MANIFEST_VERSION = 1

    def __init__(self, manifest_path: Path):
        """
        Initialize the backend.

        Args:
            manifest_path: Path of the JSON manifest (created on first save)
        """
        self.manifest_path = Path(manifest_path)

    def load(self) -> List[RevisionSnapshot]:
        if not self.manifest_path.exists():
            return []

        try:
            data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
            snapshots = [RevisionSnapshot.from_dict(item) for item in data.get("snapshots", [])]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Failed to load revision manifest {self.manifest_path}: {e}")

        logger.debug(f"Loaded {len(snapshots)} snapshots from {self.manifest_path}")
        return snapshots

    def save(self, snapshots: List[RevisionSnapshot]) -> None:
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest = {
            "version": self.MANIFEST_VERSION,
            "last_modified": datetime.now().isoformat(),
            "snapshots": [snapshot.to_dict() for snapshot in snapshots],
        }
        temp_path = self.manifest_path.with_suffix(self.manifest_path.suffix + ".tmp")
        temp_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        temp_path.replace(self.manifest_path)
