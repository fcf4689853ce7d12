"""
ScriptForge Metrics Estimator

Derives production metrics from a snapshot of a document's lines: word and
character counts, scene count, page count and estimated runtime, plus a
per-scene duration breakdown and scene outline.

All functions are pure and recomputed from scratch on every mutation. The
pagination and runtime constants reproduce existing exports exactly.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from scriptforge.core.constants import (
    ACTION_HEAVY_FACTOR,
    AV_WORDS_PER_MINUTE,
    CHARS_PER_LINE,
    DIALOGUE_HEAVY_FACTOR,
    LINES_PER_PAGE,
    MAX_SCENE_DURATION,
    MIN_SCENE_DURATION,
    SCENE_WORDS_PER_MINUTE,
    SINGLE_LINE_TYPES,
    SPACED_TYPES,
    STAGEPLAY_MINUTES_PER_PAGE,
    ElementType,
    ScriptMode,
)
from scriptforge.script.document import Line, ScriptDocument


@dataclass(frozen=True)
class ScriptMetrics:
    """Derived production metrics for one document state."""
    word_count: int
    character_count: int
    scene_count: int
    page_count: int
    estimated_runtime_minutes: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "word_count": self.word_count,
            "character_count": self.character_count,
            "scene_count": self.scene_count,
            "page_count": self.page_count,
            "estimated_runtime_minutes": self.estimated_runtime_minutes,
        }


def count_words(lines: Iterable[Line]) -> int:
    return sum(len(line.text.split()) for line in lines)


def count_characters(lines: Iterable[Line]) -> int:
    """Non-whitespace characters across all lines."""
    return sum(len("".join(line.text.split())) for line in lines)


def count_scenes(lines: Iterable[Line]) -> int:
    return sum(1 for line in lines if line.type == ElementType.SCENE)


def weighted_line_count(line: Line) -> int:
    """Printed lines one element occupies, including spacing."""
    if line.type in SINGLE_LINE_TYPES:
        return 1
    wrapped = max(1, math.ceil(len(line.text) / CHARS_PER_LINE))
    if line.type in SPACED_TYPES:
        return wrapped + 1
    return wrapped


def count_pages(lines: Iterable[Line]) -> int:
    total = sum(weighted_line_count(line) for line in lines)
    return max(1, math.ceil(total / LINES_PER_PAGE))


def estimate_runtime(page_count: int, word_count: int, mode: ScriptMode) -> int:
    """
    Estimated runtime in whole minutes.

    Args:
        page_count: Estimated pages
        word_count: Total words
        mode: Script mode

    Returns:
        One minute per page for film/TV, 1.5 per page for stage plays,
        words / 250 for multi-column AV scripts (rounded up)
    """
    mode = ScriptMode(mode)
    if mode == ScriptMode.STAGEPLAY:
        return math.ceil(page_count * STAGEPLAY_MINUTES_PER_PAGE)
    if mode == ScriptMode.MULTI_COLUMN_AV:
        return math.ceil(word_count / AV_WORDS_PER_MINUTE)
    return page_count


def compute_metrics(lines: Sequence[Line], mode: ScriptMode = ScriptMode.FILM_TV) -> ScriptMetrics:
    """Compute all document-level metrics from a line snapshot."""
    word_count = count_words(lines)
    page_count = count_pages(lines)
    return ScriptMetrics(
        word_count=word_count,
        character_count=count_characters(lines),
        scene_count=count_scenes(lines),
        page_count=page_count,
        estimated_runtime_minutes=estimate_runtime(page_count, word_count, mode),
    )


def document_metrics(document: ScriptDocument) -> ScriptMetrics:
    return compute_metrics(document.snapshot_lines(), document.mode)


# =============================================================================
# SCENE BREAKDOWN
# =============================================================================

@dataclass
class SceneDuration:
    """Estimated screen time of one scene."""
    number: int
    heading: str
    start_line: int
    end_line: int
    duration: float  # minutes
    line_ids: List[str] = field(default_factory=list)


@dataclass
class DurationSummary:
    scenes: List[SceneDuration]
    total: float

    @property
    def average(self) -> float:
        return self.total / len(self.scenes) if self.scenes else 0.0

    @property
    def longest(self) -> Optional[SceneDuration]:
        return max(self.scenes, key=lambda s: s.duration, default=None)

    @property
    def shortest(self) -> Optional[SceneDuration]:
        return min(self.scenes, key=lambda s: s.duration, default=None)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scene_duration(lines: Sequence[Line], mode: ScriptMode = ScriptMode.FILM_TV) -> float:
    """
    Estimate one scene's duration in minutes from its words.

    Dialogue-heavy scenes play faster, action-heavy scenes slower; the
    result is clamped to the minimum and maximum scene durations.
    """
    if not lines:
        return 0.0

    words_per_minute = SCENE_WORDS_PER_MINUTE.get(ScriptMode(mode), 150)
    duration = count_words(lines) / words_per_minute

    actions = sum(1 for line in lines if line.type == ElementType.ACTION)
    dialogues = sum(1 for line in lines if line.type == ElementType.DIALOGUE)
    if dialogues > actions:
        duration *= DIALOGUE_HEAVY_FACTOR
    if actions > dialogues * 2:
        duration *= ACTION_HEAVY_FACTOR

    return max(MIN_SCENE_DURATION, min(MAX_SCENE_DURATION, duration))


def split_scenes(lines: Sequence[Line]) -> List[List[Line]]:
    """Group lines by scene heading; lines before the first heading form the first group."""
    groups: List[List[Line]] = []
    current: List[Line] = []
    for line in lines:
        if line.type == ElementType.SCENE and current:
            groups.append(current)
            current = []
        current.append(line)
    if current:
        groups.append(current)
    return groups


def scene_durations(lines: Sequence[Line], mode: ScriptMode = ScriptMode.FILM_TV) -> DurationSummary:
    """Per-scene duration breakdown with the running total."""
    scenes = []
    start = 0
    for number, group in enumerate(split_scenes(lines), start=1):
        heading = group[0].text if group[0].type == ElementType.SCENE else ""
        scenes.append(SceneDuration(
            number=number,
            heading=heading,
            start_line=start,
            end_line=start + len(group) - 1,
            duration=scene_duration(group, mode),
            line_ids=[line.id for line in group],
        ))
        start += len(group)
    return DurationSummary(scenes=scenes, total=sum(s.duration for s in scenes))


def format_duration(minutes: float) -> str:
    """Render minutes as '45s', '12m' or '1h 5m'."""
    if minutes < 1:
        return f"{_round_half_up(minutes * 60)}s"
    hours = int(minutes // 60)
    mins = _round_half_up(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


# =============================================================================
# OUTLINE
# =============================================================================

@dataclass(frozen=True)
class OutlineEntry:
    number: int
    line_id: str
    index: int
    heading: str


def scene_outline(lines: Sequence[Line]) -> List[OutlineEntry]:
    """Numbered scene headings in document order."""
    entries = []
    for index, line in enumerate(lines):
        if line.type == ElementType.SCENE:
            entries.append(OutlineEntry(
                number=len(entries) + 1,
                line_id=line.id,
                index=index,
                heading=line.text,
            ))
    return entries
