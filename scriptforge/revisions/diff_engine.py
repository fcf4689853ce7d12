"""
ScriptForge Diff Engine

Line-oriented comparison between two texts, used by the revision store and
any comparison view.

This is a greedy two-cursor walk, not a minimal edit script. When the
current old and new lines differ, the engine looks ahead for the new line
in the remaining old lines and for the old line in the remaining new lines;
the closer match decides. Equal distances (including neither line being
found again) resolve to treating the old line as removed. Existing
comparison output depends on this exact resolution.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence


class DiffType(str, Enum):
    """Classification of a diffed line."""
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffEntry:
    """One line of diff output; line_number is 1-based in its own text."""
    type: DiffType
    line: str
    line_number: int

    def to_dict(self) -> Dict:
        return {"type": self.type.value, "line": self.line, "lineNumber": self.line_number}


def _offset(items: Sequence[str], value: str, start: int) -> float:
    """Distance from start to the next occurrence of value; infinity if absent."""
    for offset, item in enumerate(items[start:]):
        if item == value:
            return offset
    return math.inf


def diff_lines(old_lines: Sequence[str], new_lines: Sequence[str]) -> List[DiffEntry]:
    """
    Diff two line sequences.

    Args:
        old_lines: Lines of the earlier version
        new_lines: Lines of the later version

    Returns:
        Ordered DiffEntry list covering every line of both inputs
    """
    result: List[DiffEntry] = []
    i, j = 0, 0

    while i < len(old_lines) or j < len(new_lines):
        if i >= len(old_lines):
            result.append(DiffEntry(DiffType.ADDED, new_lines[j], j + 1))
            j += 1
        elif j >= len(new_lines):
            result.append(DiffEntry(DiffType.REMOVED, old_lines[i], i + 1))
            i += 1
        elif old_lines[i] == new_lines[j]:
            result.append(DiffEntry(DiffType.UNCHANGED, old_lines[i], i + 1))
            i += 1
            j += 1
        else:
            old_match = _offset(old_lines, new_lines[j], i + 1)
            new_match = _offset(new_lines, old_lines[i], j + 1)
            if old_match <= new_match:
                result.append(DiffEntry(DiffType.REMOVED, old_lines[i], i + 1))
                i += 1
            else:
                result.append(DiffEntry(DiffType.ADDED, new_lines[j], j + 1))
                j += 1

    return result


def diff(old_text: str, new_text: str) -> List[DiffEntry]:
    """Diff two texts line by line (split on newlines)."""
    return diff_lines(old_text.split("\n"), new_text.split("\n"))


def summarize(entries: Sequence[DiffEntry]) -> Dict[str, int]:
    """Count diff entries per type."""
    counts = {diff_type.value: 0 for diff_type in DiffType}
    for entry in entries:
        counts[entry.type.value] += 1
    return counts


def has_changes(entries: Sequence[DiffEntry]) -> bool:
    return any(entry.type != DiffType.UNCHANGED for entry in entries)
