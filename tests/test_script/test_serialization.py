"""
Tests for Document Serialization

Tests for scriptforge/script/serialization.py
"""

import json
from datetime import datetime

import pytest

from scriptforge.core.constants import DualPosition, ElementType, ScriptMode
from scriptforge.core.exceptions import SerializationError
from scriptforge.script.dual_dialogue import toggle_dual
from scriptforge.script.serialization import (
    content_to_plain_text,
    deserialize_document,
    document_from_dict,
    document_to_dict,
    serialize_document,
)


class TestRoundTrip:
    """Tests for serialize/deserialize fidelity."""

    def test_lines_survive(self, sample_document):
        restored = deserialize_document(serialize_document(sample_document))

        assert restored.id == sample_document.id
        assert [(l.id, l.type, l.text) for l in restored] == [
            (l.id, l.type, l.text) for l in sample_document
        ]

    def test_meta_survives(self, dialogue_document):
        dual_id = toggle_dual(dialogue_document, "l2")
        dialogue_document.set_type("l6", ElementType.SHOT)
        stamp = datetime(2024, 5, 1, 12, 30)
        dialogue_document.get_line("l0").meta.revision_color = "Pink"
        dialogue_document.get_line("l0").meta.revision_timestamp = stamp

        restored = deserialize_document(serialize_document(dialogue_document))

        assert restored.get_line("l1").meta.dual_id == dual_id
        assert restored.get_line("l4").meta.dual_position == DualPosition.RIGHT
        assert restored.get_line("l6").meta.manual_type is True
        assert restored.get_line("l0").meta.revision_color == "Pink"
        assert restored.get_line("l0").meta.revision_timestamp == stamp

    def test_settings_and_title_page_survive(self, sample_document):
        sample_document.settings["zoom"] = 125
        sample_document.title_page["author"] = "A. Writer"
        sample_document.mode = ScriptMode.STAGEPLAY

        restored = deserialize_document(serialize_document(sample_document))

        assert restored.settings == sample_document.settings
        assert restored.title_page == sample_document.title_page
        assert restored.mode == ScriptMode.STAGEPLAY
        assert restored.title == "Sample"


class TestWireShape:
    """Tests for the stored record shape."""

    def test_camel_case_keys(self, dialogue_document):
        toggle_dual(dialogue_document, "l1")

        data = document_to_dict(dialogue_document)

        assert "titlePage" in data
        assert "updatedAt" in data
        meta = data["lines"][1]["meta"]
        assert meta["manualType"] is False
        assert meta["dualPosition"] == "left"
        assert data["lines"][1]["type"] == "character"

    def test_snake_case_input_accepted(self):
        document = document_from_dict({
            "title": "Legacy",
            "lines": [{"id": "a", "type": "scene", "text": "INT. X - DAY", "meta": {"manual_type": True}}],
            "title_page": {"title": "Legacy"},
        })

        assert document.get_line("a").meta.manual_type is True
        assert document.title_page == {"title": "Legacy"}

    def test_unknown_keys_preserved(self, sample_document):
        data = document_to_dict(sample_document)
        data["projectId"] = "proj-7"

        reloaded = document_from_dict(data)

        assert document_to_dict(reloaded)["projectId"] == "proj-7"

    def test_plain_text_of_content(self, sample_document):
        text = content_to_plain_text(serialize_document(sample_document))

        assert text == sample_document.to_plain_text()


class TestInvalidContent:
    """Tests for rejected payloads."""

    def test_not_json(self):
        with pytest.raises(SerializationError):
            deserialize_document("{oops")

    def test_not_an_object(self):
        with pytest.raises(SerializationError):
            deserialize_document(json.dumps([1, 2, 3]))

    def test_unknown_line_type(self):
        with pytest.raises(SerializationError):
            document_from_dict({"lines": [{"id": "a", "type": "song"}]})

    def test_duplicate_line_ids(self):
        with pytest.raises(SerializationError):
            document_from_dict({"lines": [{"id": "a"}, {"id": "a"}]})
