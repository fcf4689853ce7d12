"""
ScriptForge Editor Session

Wires one document to its metrics and revision history the way an editor
front end drives them: every mutation recomputes metrics from a snapshot of
the lines and notifies listeners; saves and auto-saves go to the revision
store.
"""

from typing import Callable, List, Optional

from scriptforge.core.config import EngineConfig, get_config
from scriptforge.core.constants import DEFAULT_SNAPSHOT_NOTES, ElementType
from scriptforge.core.logging_config import get_logger
from scriptforge.revisions.diff_engine import DiffEntry
from scriptforge.revisions.revision_store import RevisionStore
from scriptforge.revisions.storage import JsonFileRevisionBackend, RevisionSnapshot
from scriptforge.script import dual_dialogue
from scriptforge.script.document import ScriptDocument
from scriptforge.script.fountain import export_fountain
from scriptforge.script.metrics import DurationSummary, ScriptMetrics, compute_metrics, scene_durations

logger = get_logger("editor")

MetricsListener = Callable[[ScriptMetrics], None]


class ScriptEditor:
    """
    Editing session over a single document.

    Usage:
        editor = ScriptEditor()
        line_id = editor.press_enter(editor.document.line_ids[0])
        editor.type_text(line_id, "John enters.")
        editor.save("First pass")
    """

    def __init__(
        self,
        document: Optional[ScriptDocument] = None,
        store: Optional[RevisionStore] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or get_config()

        if document is None:
            document = ScriptDocument.create_empty(self.config.default_mode)
        self.document = self._apply_config(document)

        if store is None:
            backend = JsonFileRevisionBackend(self.config.history_path) if self.config.history_path else None
            store = RevisionStore(backend)
        self.store = store

        self._listeners: List[MetricsListener] = []
        self.metrics = compute_metrics(self.document.snapshot_lines(), self.document.mode)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def on_metrics(self, listener: MetricsListener) -> None:
        """Register a callback invoked with fresh metrics after each change."""
        self._listeners.append(listener)

    def _apply_config(self, document: ScriptDocument) -> ScriptDocument:
        document.auto_type_threshold = self.config.auto_type_threshold
        document.settings.setdefault("revision_color", self.config.revision_color)
        return document

    def _refresh(self) -> ScriptMetrics:
        self.metrics = compute_metrics(self.document.snapshot_lines(), self.document.mode)
        for listener in self._listeners:
            listener(self.metrics)
        return self.metrics

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def type_text(self, line_id: str, text: str) -> None:
        self.document.update_text(line_id, text)
        self._refresh()

    def press_enter(self, line_id: str) -> Optional[str]:
        """Commit a line and return the id of the follow-up line."""
        new_id = self.document.commit_line(line_id)
        self._refresh()
        return new_id

    def press_tab(self, line_id: str, shift: bool = False) -> None:
        self.document.cycle_type(line_id, reverse=shift)
        self._refresh()

    def press_shortcut(self, line_id: str, key: str) -> None:
        self.document.apply_shortcut(line_id, key)
        self._refresh()

    def set_type(self, line_id: str, element_type: ElementType) -> None:
        self.document.set_type(line_id, element_type)
        self._refresh()

    def press_backspace(self, line_id: str) -> None:
        """Backspace at the start of a line merges it into the previous one."""
        self.document.merge_with_previous(line_id)
        dual_dialogue.dissolve_orphan_groups(self.document)
        self._refresh()

    def delete_line(self, line_id: str) -> None:
        self.document.delete_line(line_id)
        dual_dialogue.dissolve_orphan_groups(self.document)
        self._refresh()

    def toggle_dual(self, line_id: str) -> Optional[str]:
        dual_id = dual_dialogue.toggle_dual(self.document, line_id)
        self._refresh()
        return dual_id

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def save(self, notes: str = DEFAULT_SNAPSHOT_NOTES) -> RevisionSnapshot:
        """Normalize formatting and record an explicit snapshot."""
        self.document.format_all()
        self._refresh()
        return self.store.snapshot(self.document, notes)

    def auto_save(self) -> RevisionSnapshot:
        return self.store.auto_save(self.document)

    def restore(self, snapshot_id: str) -> ScriptDocument:
        """Replace the working document with a snapshot's content."""
        restored = self._apply_config(self.store.restore_document(snapshot_id))
        self.document = restored
        self._refresh()
        logger.info(f"Editor now holds {snapshot_id} ({len(restored)} lines)")
        return restored

    def compare(self, old_id: str, new_id: str) -> List[DiffEntry]:
        return self.store.compare(old_id, new_id)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def scene_breakdown(self) -> DurationSummary:
        return scene_durations(self.document.snapshot_lines(), self.document.mode)

    def export_text(self) -> str:
        return export_fountain(self.document)
