"""
Tests for Editor Session

Tests for scriptforge/editor.py
"""

import pytest

from scriptforge.core.config import EngineConfig
from scriptforge.core.constants import ElementType, ScriptMode
from scriptforge.editor import ScriptEditor
from scriptforge.revisions.revision_store import RevisionStore


@pytest.fixture
def editor():
    return ScriptEditor(config=EngineConfig())


class TestEditing:
    """Tests for keyboard-level editing through the session."""

    def test_new_session(self, editor):
        assert len(editor.document) == 1
        assert editor.metrics.word_count == 2
        assert editor.document.settings["revision_color"] == "Blue"

    def test_metrics_follow_edits(self, editor):
        updates = []
        editor.on_metrics(updates.append)
        opening = editor.document.line_ids[0]

        line_id = editor.press_enter(opening)
        editor.type_text(line_id, "INT. GARAGE - NIGHT")

        assert editor.document.get_line(line_id).type == ElementType.SCENE
        assert editor.metrics.scene_count == 2
        assert len(updates) == 2
        assert updates[-1] == editor.metrics

    def test_tab_and_shortcut(self, editor):
        line_id = editor.press_enter(editor.document.line_ids[0])

        editor.press_tab(line_id)
        assert editor.document.get_line(line_id).type == ElementType.CHARACTER

        editor.press_tab(line_id, shift=True)
        assert editor.document.get_line(line_id).type == ElementType.ACTION

        editor.press_shortcut(line_id, "6")
        assert editor.document.get_line(line_id).type == ElementType.TRANSITION

    def test_config_threshold_applied(self):
        editor = ScriptEditor(config=EngineConfig(auto_type_threshold=0.5))
        line_id = editor.press_enter(editor.document.line_ids[0])

        editor.type_text(line_id, "MAYA")

        assert editor.document.get_line(line_id).type == ElementType.CHARACTER

    def test_config_mode(self):
        editor = ScriptEditor(config=EngineConfig(default_mode=ScriptMode.STAGEPLAY))

        assert editor.document.mode == ScriptMode.STAGEPLAY
        assert editor.metrics.estimated_runtime_minutes == 2

    def test_delete_dissolves_orphaned_dual(self, dialogue_document):
        editor = ScriptEditor(document=dialogue_document, config=EngineConfig())
        editor.toggle_dual("l2")

        for line_id in ("l5", "l4", "l3"):
            editor.delete_line(line_id)

        assert all(line.meta.dual_id is None for line in editor.document)


class TestHistory:
    """Tests for save, auto-save and restore through the session."""

    def test_save_formats_and_snapshots(self, make_document):
        document = make_document([(ElementType.SCENE, "int. den - day")])
        editor = ScriptEditor(document=document, config=EngineConfig())

        snapshot = editor.save("Draft 1")

        assert editor.document.lines[0].text == "INT. DEN - DAY"
        assert snapshot.notes == "Draft 1"
        assert editor.store.current.id == snapshot.id

    def test_restore_replaces_document(self, editor):
        first = editor.save()
        line_id = editor.press_enter(editor.document.line_ids[0])
        editor.type_text(line_id, "Rain falls.")
        editor.save()

        restored = editor.restore(first.id)

        assert editor.document is restored
        assert len(restored) == 1
        assert editor.metrics.word_count == 2

    def test_restore_applies_configured_revision_color(self, make_document):
        """Test a snapshot saved without a revision color picks up the configured one."""
        store = RevisionStore()
        saved = store.snapshot(make_document([(ElementType.ACTION, "Rain falls.")], settings={}))
        editor = ScriptEditor(store=store, config=EngineConfig(revision_color="pink"))

        restored = editor.restore(saved.id)

        assert restored.settings["revision_color"] == "pink"

    def test_auto_save_then_compare(self, editor):
        first = editor.save()
        line_id = editor.press_enter(editor.document.line_ids[0])
        editor.type_text(line_id, "Rain falls.")

        auto = editor.auto_save()
        entries = editor.compare(first.id, auto.id)

        assert [e.line for e in entries if e.type.value == "added"] == ["Rain falls."]

    def test_history_path_uses_file_backend(self, temp_dir):
        config = EngineConfig(history_path=temp_dir / "history.json")
        editor = ScriptEditor(config=config)

        editor.save()

        assert (temp_dir / "history.json").exists()


class TestViews:
    """Tests for derived views."""

    def test_scene_breakdown(self, sample_document):
        editor = ScriptEditor(document=sample_document, config=EngineConfig())

        assert len(editor.scene_breakdown().scenes) == 2

    def test_export_text(self, sample_document):
        editor = ScriptEditor(document=sample_document, config=EngineConfig())

        assert editor.export_text().startswith("INT. OFFICE - DAY\n")
