"""
Tests for Dual-Dialogue Linker

Tests for scriptforge/script/dual_dialogue.py
"""

import pytest

from scriptforge.core.constants import DualPosition, ElementType
from scriptforge.core.exceptions import InvalidDualTargetError
from scriptforge.script.document import LineMeta
from scriptforge.script.dual_dialogue import (
    dissolve_orphan_groups,
    dual_groups,
    find_block,
    require_dual_pair,
    toggle_dual,
)


def _metas(document):
    return [(line.meta.dual_id, line.meta.dual_position) for line in document]


class TestFindBlock:
    """Tests for character block discovery."""

    def test_block_from_dialogue_line(self, dialogue_document):
        block = find_block(dialogue_document, "l2")

        assert [line.id for line in block] == ["l1", "l2"]

    def test_block_includes_parentheticals(self, dialogue_document):
        block = find_block(dialogue_document, "l3")

        assert [line.id for line in block] == ["l3", "l4", "l5"]

    def test_no_block_for_scene(self, dialogue_document):
        assert find_block(dialogue_document, "l0") == []

    def test_no_block_for_unknown_line(self, dialogue_document):
        assert find_block(dialogue_document, "missing") == []


class TestToggleDual:
    """Tests for linking and unlinking dual dialogue."""

    def test_link_consecutive_blocks(self, dialogue_document):
        dual_id = toggle_dual(dialogue_document, "l2")

        assert dual_id is not None
        group = dual_groups(dialogue_document)[dual_id]
        assert group.left == ["l1", "l2"]
        assert group.right == ["l3", "l4", "l5"]
        assert group.is_active
        assert dialogue_document.get_line("l6").meta.dual_id is None

    def test_positions(self, dialogue_document):
        toggle_dual(dialogue_document, "l1")

        assert dialogue_document.get_line("l1").meta.dual_position == DualPosition.LEFT
        assert dialogue_document.get_line("l5").meta.dual_position == DualPosition.RIGHT

    def test_toggle_twice_restores_meta(self, dialogue_document):
        """Test toggling the same line twice leaves no dual tags behind."""
        before = _metas(dialogue_document)

        toggle_dual(dialogue_document, "l2")
        result = toggle_dual(dialogue_document, "l2")

        assert result is None
        assert _metas(dialogue_document) == before
        assert all(line.meta == LineMeta() for line in dialogue_document)

    def test_toggle_from_other_side_dissolves(self, dialogue_document):
        toggle_dual(dialogue_document, "l1")

        toggle_dual(dialogue_document, "l4")

        assert dual_groups(dialogue_document) == {}

    def test_no_partner_before_action_is_noop(self, dialogue_document):
        """Test the last block has no partner because action stops the search."""
        assert toggle_dual(dialogue_document, "l5") is None
        assert dual_groups(dialogue_document) == {}

    def test_no_character_block_is_noop(self, dialogue_document):
        assert toggle_dual(dialogue_document, "l6") is None
        assert dual_groups(dialogue_document) == {}

    def test_unknown_line_is_noop(self, dialogue_document):
        assert toggle_dual(dialogue_document, "missing") is None

    def test_require_pair_raises(self, dialogue_document):
        with pytest.raises(InvalidDualTargetError):
            require_dual_pair(dialogue_document, "l5")

    def test_search_skips_transition(self, make_document):
        """Test only scene and action stop the partner search."""
        document = make_document([
            (ElementType.CHARACTER, "ALICE"),
            (ElementType.DIALOGUE, "Now?"),
            (ElementType.TRANSITION, "CUT TO:"),
            (ElementType.CHARACTER, "BOB"),
            (ElementType.DIALOGUE, "Now."),
        ])

        dual_id = toggle_dual(document, "l0")

        assert dual_groups(document)[dual_id].right == ["l3", "l4"]


class TestOrphanGroups:
    """Tests for dissolving half-empty groups."""

    def test_deleting_a_side_dissolves_group(self, make_document):
        document = make_document([
            (ElementType.CHARACTER, "ALICE"),
            (ElementType.CHARACTER, "BOB"),
            (ElementType.ACTION, "They stare."),
        ])
        toggle_dual(document, "l0")

        document.delete_line("l1")
        dissolved = dissolve_orphan_groups(document)

        assert len(dissolved) == 1
        assert document.get_line("l0").meta.dual_id is None

    def test_active_groups_untouched(self, dialogue_document):
        dual_id = toggle_dual(dialogue_document, "l2")

        assert dissolve_orphan_groups(dialogue_document) == []
        assert dual_id in dual_groups(dialogue_document)
