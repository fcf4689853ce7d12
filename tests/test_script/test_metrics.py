"""
Tests for Metrics Estimator

Tests for scriptforge/script/metrics.py
"""

import pytest

from scriptforge.core.constants import ElementType, ScriptMode
from scriptforge.script.document import Line
from scriptforge.script.metrics import (
    compute_metrics,
    count_pages,
    document_metrics,
    format_duration,
    scene_durations,
    scene_outline,
    weighted_line_count,
)


def _lines(element_type, count, text=""):
    return [Line(id=f"x{i}", type=element_type, text=text) for i in range(count)]


class TestComputeMetrics:
    """Tests for document-level metrics."""

    def test_two_scene_fragment(self, sample_document):
        """Test scene and word counts of the sample fragment."""
        metrics = document_metrics(sample_document)

        assert metrics.scene_count == 2
        # 4 + 2 + 1 + 1 + 4 whitespace-delimited tokens
        assert metrics.word_count == 12
        assert metrics.page_count == 1
        assert metrics.estimated_runtime_minutes == 1

    def test_character_count_ignores_whitespace(self):
        lines = [Line(id="a", text="John enters."), Line(id="b", text=" Hi ")]

        assert compute_metrics(lines).character_count == 13

    def test_empty_document_is_one_page(self):
        metrics = compute_metrics([Line(id="a")])

        assert metrics.word_count == 0
        assert metrics.page_count == 1

    def test_to_dict(self, sample_document):
        data = document_metrics(sample_document).to_dict()

        assert set(data) == {
            "word_count", "character_count", "scene_count", "page_count", "estimated_runtime_minutes"
        }


class TestPagination:
    """Tests for the weighted page estimate."""

    def test_spaced_types_add_a_line(self):
        assert weighted_line_count(Line(id="a", type=ElementType.ACTION, text="x")) == 2
        assert weighted_line_count(Line(id="a", type=ElementType.SCENE, text="x")) == 2
        assert weighted_line_count(Line(id="a", type=ElementType.TRANSITION, text="x")) == 2

    def test_character_and_parenthetical_are_single_lines(self):
        long_text = "X" * 200

        assert weighted_line_count(Line(id="a", type=ElementType.CHARACTER, text=long_text)) == 1
        assert weighted_line_count(Line(id="a", type=ElementType.PARENTHETICAL, text=long_text)) == 1

    def test_long_dialogue_wraps(self):
        assert weighted_line_count(Line(id="a", type=ElementType.DIALOGUE, text="y" * 121)) == 3

    def test_page_boundary(self):
        """Test 55 weighted lines fill exactly one page."""
        assert count_pages(_lines(ElementType.CHARACTER, 55)) == 1
        assert count_pages(_lines(ElementType.CHARACTER, 56)) == 2
        assert count_pages(_lines(ElementType.ACTION, 28)) == 2


class TestRuntime:
    """Tests for mode-dependent runtime."""

    def test_film_is_one_minute_per_page(self):
        metrics = compute_metrics(_lines(ElementType.ACTION, 60), ScriptMode.FILM_TV)

        assert metrics.page_count == 3
        assert metrics.estimated_runtime_minutes == 3

    def test_stageplay_rounds_up(self):
        metrics = compute_metrics(_lines(ElementType.ACTION, 1), ScriptMode.STAGEPLAY)

        assert metrics.estimated_runtime_minutes == 2

    def test_av_uses_words(self):
        lines = _lines(ElementType.ACTION, 251, text="word")

        metrics = compute_metrics(lines, ScriptMode.MULTI_COLUMN_AV)

        assert metrics.estimated_runtime_minutes == 2


class TestSceneDurations:
    """Tests for the per-scene breakdown."""

    def test_short_scenes_clamp_to_minimum(self, sample_document):
        summary = scene_durations(sample_document.snapshot_lines())

        assert [s.heading for s in summary.scenes] == ["INT. OFFICE - DAY", "EXT. STREET - NIGHT"]
        assert [s.duration for s in summary.scenes] == [0.5, 0.5]
        assert summary.total == 1.0
        assert summary.average == 0.5

    def test_line_ranges(self, sample_document):
        summary = scene_durations(sample_document.snapshot_lines())

        assert (summary.scenes[0].start_line, summary.scenes[0].end_line) == (0, 3)
        assert summary.scenes[1].line_ids == ["l4"]

    def test_lines_before_first_heading(self):
        lines = [Line(id="a", text="Cold open."), Line(id="b", type=ElementType.SCENE, text="INT. X - DAY")]

        summary = scene_durations(lines)

        assert summary.scenes[0].heading == ""
        assert summary.scenes[0].line_ids == ["a"]
        assert len(summary.scenes) == 2

    def test_long_scene_clamps_to_maximum(self):
        text = " ".join(["word"] * 1500)
        lines = [Line(id="s", type=ElementType.SCENE, text="INT. X - DAY"), Line(id="a", text=text)]

        summary = scene_durations(lines)

        assert summary.scenes[0].duration == 10
        assert summary.longest is summary.scenes[0]

    def test_dialogue_heavy_plays_faster(self):
        speech = " ".join(["word"] * 300)
        lines = [
            Line(id="s", type=ElementType.SCENE, text="INT. X - DAY"),
            Line(id="d1", type=ElementType.DIALOGUE, text=speech),
            Line(id="d2", type=ElementType.DIALOGUE, text=speech),
        ]

        summary = scene_durations(lines)

        # (4 + 600) / 150 * 0.8
        assert summary.scenes[0].duration == pytest.approx(604 / 150 * 0.8)

    def test_empty_summary(self):
        summary = scene_durations([])

        assert summary.scenes == []
        assert summary.average == 0.0
        assert summary.longest is None


class TestFormatDuration:
    """Tests for duration rendering."""

    @pytest.mark.parametrize("minutes, expected", [
        (0.75, "45s"),
        (0.5, "30s"),
        (12, "12m"),
        (12.4, "12m"),
        (65, "1h 5m"),
    ])
    def test_format(self, minutes, expected):
        assert format_duration(minutes) == expected


class TestSceneOutline:
    """Tests for the numbered scene outline."""

    def test_outline(self, sample_document):
        outline = scene_outline(sample_document.lines)

        assert [(e.number, e.index, e.heading) for e in outline] == [
            (1, 0, "INT. OFFICE - DAY"),
            (2, 4, "EXT. STREET - NIGHT"),
        ]
