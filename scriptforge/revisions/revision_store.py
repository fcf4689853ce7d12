"""
ScriptForge Revision Store

Linear version history of a document: ordered immutable snapshots of its
serialization, exactly one of which is current.

Snapshot, restore, delete and content updates run under one lock so the
single-current invariant holds between transactions. The store never
retries; backend errors propagate to the caller.
"""

import threading
from datetime import datetime
from typing import List, Optional

from scriptforge.core.constants import AUTO_SAVE_NOTE_PREFIX, DEFAULT_SNAPSHOT_NOTES
from scriptforge.core.exceptions import EmptyHistoryError, SnapshotNotFoundError
from scriptforge.core.id_system import new_snapshot_id
from scriptforge.core.logging_config import get_logger
from scriptforge.revisions.diff_engine import DiffEntry, diff
from scriptforge.revisions.storage import InMemoryRevisionBackend, RevisionBackend, RevisionSnapshot
from scriptforge.script.document import ScriptDocument
from scriptforge.script.serialization import (
    content_to_plain_text,
    deserialize_document,
    serialize_document,
)

logger = get_logger("revisions.store")


class RevisionStore:
    """Manages the snapshot history of one document."""

    def __init__(self, backend: Optional[RevisionBackend] = None):
        """
        Initialize the store.

        Args:
            backend: Persistence backend; defaults to in-memory
        """
        self._backend = backend or InMemoryRevisionBackend()
        self._lock = threading.RLock()
        self._snapshots: List[RevisionSnapshot] = sorted(
            self._backend.load(), key=lambda s: s.sequence_number
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def current(self) -> Optional[RevisionSnapshot]:
        with self._lock:
            return next((s for s in self._snapshots if s.is_current), None)

    def list_snapshots(self) -> List[RevisionSnapshot]:
        """All snapshots, newest first."""
        with self._lock:
            return sorted(self._snapshots, key=lambda s: s.sequence_number, reverse=True)

    def find(self, snapshot_id: str) -> Optional[RevisionSnapshot]:
        with self._lock:
            return next((s for s in self._snapshots if s.id == snapshot_id), None)

    def get(self, snapshot_id: str) -> RevisionSnapshot:
        """
        Get a snapshot by id.

        Raises:
            SnapshotNotFoundError: If the id is unknown
        """
        snapshot = self.find(snapshot_id)
        if snapshot is None:
            raise SnapshotNotFoundError(snapshot_id)
        return snapshot

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def snapshot(self, document: ScriptDocument, notes: str = DEFAULT_SNAPSHOT_NOTES) -> RevisionSnapshot:
        """
        Capture the document as the new current snapshot.

        Args:
            document: Document to serialize
            notes: Free-form description

        Returns:
            The created snapshot
        """
        content = serialize_document(document)
        with self._lock:
            sequence_number = max((s.sequence_number for s in self._snapshots), default=0) + 1
            created = RevisionSnapshot(
                id=new_snapshot_id(),
                sequence_number=sequence_number,
                content=content,
                notes=notes,
                created_at=datetime.now(),
                is_current=True,
            )
            self._persist([s.with_current(False) for s in self._snapshots] + [created])

        logger.info(f"Saved snapshot {created.revision_number} ({notes})")
        return created

    def update_snapshot_content(self, snapshot_id: str, content: str) -> None:
        """Replace a snapshot's content in place (auto-save); unknown ids are ignored."""
        with self._lock:
            for index, existing in enumerate(self._snapshots):
                if existing.id == snapshot_id:
                    updated = list(self._snapshots)
                    updated[index] = RevisionSnapshot(
                        id=existing.id,
                        sequence_number=existing.sequence_number,
                        content=content,
                        notes=existing.notes,
                        created_at=datetime.now(),
                        is_current=existing.is_current,
                    )
                    self._persist(updated)
                    logger.debug(f"Updated content of {existing.revision_number}")
                    return
        logger.debug(f"update_snapshot_content ignored for unknown snapshot {snapshot_id}")

    def auto_save(self, document: ScriptDocument) -> RevisionSnapshot:
        """
        Auto-save policy: refresh the current auto-saved snapshot, or start a new one.

        Returns:
            The snapshot now holding the document
        """
        with self._lock:
            current = self.current
            if current is not None and current.notes.startswith(AUTO_SAVE_NOTE_PREFIX):
                self.update_snapshot_content(current.id, serialize_document(document))
                return self.get(current.id)
            notes = f"{AUTO_SAVE_NOTE_PREFIX} on {datetime.now():%Y-%m-%d %H:%M:%S}"
            return self.snapshot(document, notes)

    def restore(self, snapshot_id: str) -> str:
        """
        Make a snapshot current and return its content.

        Other snapshots are kept unchanged apart from losing the current flag.

        Raises:
            SnapshotNotFoundError: If the id is unknown
        """
        with self._lock:
            target = self.get(snapshot_id)
            self._persist([s.with_current(s.id == snapshot_id) for s in self._snapshots])

        logger.info(f"Restored snapshot {target.revision_number}")
        return target.content

    def restore_document(self, snapshot_id: str) -> ScriptDocument:
        """Restore a snapshot and load its content into a fresh document."""
        return deserialize_document(self.restore(snapshot_id))

    def delete_snapshot(self, snapshot_id: str) -> None:
        """
        Delete a snapshot.

        If it was current, the remaining snapshot with the highest sequence
        number becomes current.

        Raises:
            EmptyHistoryError: If no snapshots remain
        """
        with self._lock:
            target = self.find(snapshot_id)
            if target is None:
                logger.debug(f"delete_snapshot ignored for unknown snapshot {snapshot_id}")
                return

            remaining = [s for s in self._snapshots if s.id != snapshot_id]
            newest = None
            if target.is_current and remaining:
                newest = max(remaining, key=lambda s: s.sequence_number)
                remaining = [s.with_current(s.id == newest.id) for s in remaining]
            self._persist(remaining)

            if newest is not None:
                logger.info(f"{newest.revision_number} is now current")

            logger.info(f"Deleted snapshot {target.revision_number}")
            if not self._snapshots:
                raise EmptyHistoryError("delete_snapshot")

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def download_text(self, snapshot_id: str) -> str:
        """Plain-text rendering of a snapshot (line texts joined by newlines)."""
        return content_to_plain_text(self.get(snapshot_id).content)

    def compare(self, old_id: str, new_id: str) -> List[DiffEntry]:
        """Line diff between the plain-text renderings of two snapshots."""
        return diff(self.download_text(old_id), self.download_text(new_id))

    def _persist(self, snapshots: List[RevisionSnapshot]) -> None:
        """Save a new history; memory only changes once the backend accepted it."""
        self._backend.save(list(snapshots))
        self._snapshots = snapshots
