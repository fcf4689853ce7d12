"""
ScriptForge Document Model

Ordered sequence of typed lines with stable identity. The document owns its
lines exclusively; metrics and the revision store work from snapshots.

Mutations referencing a line id that no longer exists are no-ops, since UI
events may race ahead of state. Reads that must return a value raise
LineNotFoundError.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from scriptforge.core.constants import (
    AUTO_TYPE_CONFIDENCE_THRESHOLD,
    DEFAULT_REVISION_COLOR,
    DEFAULT_SETTINGS,
    DEFAULT_TITLE,
    DEFAULT_TITLE_PAGE,
    SHORTCUT_TYPES,
    DualPosition,
    ElementType,
    ScriptMode,
)
from scriptforge.core.exceptions import LineNotFoundError
from scriptforge.core.id_system import new_document_id, new_line_id
from scriptforge.core.logging_config import get_logger
from scriptforge.script import classifier

logger = get_logger("script.document")


@dataclass
class LineMeta:
    """Fixed set of optional per-line attributes."""
    manual_type: bool = False
    dual_id: Optional[str] = None
    dual_position: Optional[DualPosition] = None
    revision_color: Optional[str] = None
    revision_timestamp: Optional[datetime] = None

    @property
    def is_dual(self) -> bool:
        return self.dual_id is not None

    def clear_dual(self) -> None:
        self.dual_id = None
        self.dual_position = None


@dataclass
class Line:
    """One addressable unit of screenplay content."""
    id: str
    type: ElementType = ElementType.ACTION
    text: str = ""
    meta: LineMeta = field(default_factory=LineMeta)

    def copy(self) -> "Line":
        return copy.deepcopy(self)


class ScriptDocument:
    """
    A screenplay as an ordered list of Lines plus opaque settings.

    Insertion order is reading/shooting order. The document never becomes
    empty: deleting the last remaining line is a no-op.
    """

    def __init__(
        self,
        lines: Optional[List[Line]] = None,
        title: str = DEFAULT_TITLE,
        mode: ScriptMode = ScriptMode.FILM_TV,
        settings: Optional[Dict[str, Any]] = None,
        title_page: Optional[Dict[str, Any]] = None,
        document_id: Optional[str] = None,
        auto_type_threshold: float = AUTO_TYPE_CONFIDENCE_THRESHOLD,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.id = document_id or new_document_id()
        # Stored fields the engine doesn't interpret, kept for lossless round-trips
        self.extra: Dict[str, Any] = dict(extra or {})
        self.title = title
        self.mode = ScriptMode(mode)
        self.settings: Dict[str, Any] = dict(settings) if settings is not None else dict(DEFAULT_SETTINGS)
        self.title_page: Dict[str, Any] = dict(title_page) if title_page is not None else dict(DEFAULT_TITLE_PAGE)
        self.auto_type_threshold = auto_type_threshold
        self.updated_at = datetime.now()

        self._lines: List[Line] = []
        self._by_id: Dict[str, Line] = {}
        for line in lines or []:
            if line.id in self._by_id:
                raise ValueError(f"Duplicate line id: {line.id}")
            self._lines.append(line)
            self._by_id[line.id] = line

        if not self._lines:
            self._append(Line(id=new_line_id()))

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def create_empty(cls, mode: ScriptMode = ScriptMode.FILM_TV) -> "ScriptDocument":
        """New script seeded with a single FADE IN: scene line."""
        opening = Line(id=new_line_id(), type=ElementType.SCENE, text="FADE IN:")
        return cls(lines=[opening], mode=mode)

    @classmethod
    def from_plain_text(cls, content: str, **kwargs) -> "ScriptDocument":
        """
        Convert legacy plain string content into a document.

        Blank lines are dropped. The first line is a scene when it contains
        FADE IN; everything else starts as action.
        """
        lines = []
        for index, raw in enumerate((content or "").split("\n")):
            text = raw.strip()
            if not text:
                continue
            is_opening = index == 0 and "FADE IN" in text
            lines.append(Line(
                id=new_line_id(),
                type=ElementType.SCENE if is_opening else ElementType.ACTION,
                text=text,
            ))
        return cls(lines=lines, **kwargs)

    def to_plain_text(self) -> str:
        """Line texts joined by newlines (legacy save format)."""
        return "\n".join(line.text for line in self._lines)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(list(self._lines))

    def __contains__(self, line_id: str) -> bool:
        return line_id in self._by_id

    @property
    def lines(self) -> Tuple[Line, ...]:
        return tuple(self._lines)

    @property
    def line_ids(self) -> List[str]:
        return [line.id for line in self._lines]

    def find_line(self, line_id: str) -> Optional[Line]:
        return self._by_id.get(line_id)

    def get_line(self, line_id: str) -> Line:
        """
        Get a line by id.

        Raises:
            LineNotFoundError: If the id is unknown
        """
        line = self._by_id.get(line_id)
        if line is None:
            raise LineNotFoundError(line_id)
        return line

    def index_of(self, line_id: str) -> int:
        """Position of a line; -1 when the id is unknown."""
        line = self._by_id.get(line_id)
        if line is None:
            return -1
        return self._lines.index(line)

    def previous_line(self, line_id: str) -> Optional[Line]:
        index = self.index_of(line_id)
        if index <= 0:
            return None
        return self._lines[index - 1]

    def snapshot_lines(self) -> Tuple[Line, ...]:
        """Independent copies of all lines, safe to hand to other components."""
        return tuple(line.copy() for line in self._lines)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def insert_after(
        self,
        line_id: Optional[str],
        initial_type: ElementType = ElementType.ACTION
    ) -> str:
        """
        Insert a new empty line after the given line.

        Args:
            line_id: Line to insert after; None or unknown appends at the end
            initial_type: Type of the new line

        Returns:
            Id of the new line
        """
        new_line = Line(id=new_line_id(), type=ElementType(initial_type))
        index = self.index_of(line_id) if line_id is not None else -1
        if index < 0:
            self._append(new_line)
        else:
            self._lines.insert(index + 1, new_line)
            self._by_id[new_line.id] = new_line
        self.touch()
        logger.debug(f"Inserted {new_line.type.value} line {new_line.id} after {line_id}")
        return new_line.id

    def update_text(self, line_id: str, text: str) -> None:
        """
        Set a line's text and re-infer its type unless it was set manually.

        The classification is applied only when its confidence exceeds the
        auto-type threshold.
        """
        line = self._by_id.get(line_id)
        if line is None:
            logger.debug(f"update_text ignored for unknown line {line_id}")
            return

        if not line.meta.manual_type:
            previous = self.previous_line(line_id)
            result = classifier.classify(text, previous.type if previous else None)
            if result.confidence > self.auto_type_threshold:
                line.type = result.type

        self._set_text(line, text)
        self.touch()

    def set_type(self, line_id: str, element_type: ElementType) -> None:
        """Explicitly set a line's type; the classifier won't override it afterwards."""
        line = self._by_id.get(line_id)
        if line is None:
            logger.debug(f"set_type ignored for unknown line {line_id}")
            return
        line.type = ElementType(element_type)
        line.meta.manual_type = True
        self.touch()

    def cycle_type(self, line_id: str, reverse: bool = False) -> None:
        """Advance a line's type through the Tab ring (manual)."""
        line = self._by_id.get(line_id)
        if line is None:
            logger.debug(f"cycle_type ignored for unknown line {line_id}")
            return
        self.set_type(line_id, classifier.cycle_type(line.type, reverse))

    def apply_shortcut(self, line_id: str, key: str) -> None:
        """Apply a Ctrl/Cmd+digit type shortcut; unknown keys are ignored."""
        element_type = SHORTCUT_TYPES.get(key)
        if element_type is not None:
            self.set_type(line_id, element_type)

    @staticmethod
    def next_type_after(current_type: ElementType, is_double_enter: bool = False) -> ElementType:
        return classifier.next_type_after(current_type, is_double_enter)

    def commit_line(self, line_id: str) -> Optional[str]:
        """
        Handle Enter on a line: insert the follow-up line with its default type.

        An empty dialogue line counts as a double Enter and drops back to action.

        Returns:
            Id of the inserted line, or None if the line is unknown
        """
        line = self._by_id.get(line_id)
        if line is None:
            return None
        is_double_enter = line.type == ElementType.DIALOGUE and not line.text.strip()
        return self.insert_after(line_id, self.next_type_after(line.type, is_double_enter))

    def delete_line(self, line_id: str) -> None:
        """Remove a line unless it is the only one left."""
        line = self._by_id.get(line_id)
        if line is None:
            return
        if len(self._lines) <= 1:
            logger.debug("Refusing to delete the last remaining line")
            return
        self._lines.remove(line)
        del self._by_id[line_id]
        self.touch()

    def merge_with_previous(self, line_id: str) -> None:
        """Backspace at line start: join this line's text onto the previous line."""
        line = self._by_id.get(line_id)
        previous = self.previous_line(line_id)
        if line is None or previous is None:
            return
        combined = previous.text + (" " + line.text if line.text else "")
        self._set_text(previous, combined)
        self._lines.remove(line)
        del self._by_id[line_id]
        self.touch()

    def move_line(self, line_id: str, after_id: Optional[str]) -> None:
        """Reorder a line to sit after another (None moves it to the top)."""
        line = self._by_id.get(line_id)
        if line is None or line_id == after_id:
            return
        if after_id is not None and after_id not in self._by_id:
            return
        self._lines.remove(line)
        index = 0 if after_id is None else self._lines.index(self._by_id[after_id]) + 1
        self._lines.insert(index, line)
        self.touch()

    def format_all(self) -> None:
        """Normalize every line's text for its type (on save/display)."""
        for line in self._lines:
            line.text = classifier.format_line(line.type, line.text)
        self.touch()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _append(self, line: Line) -> None:
        self._lines.append(line)
        self._by_id[line.id] = line

    def _set_text(self, line: Line, text: str) -> None:
        if self.settings.get("revision_mode") and text != line.text:
            line.meta.revision_color = self.settings.get("revision_color") or DEFAULT_REVISION_COLOR
            line.meta.revision_timestamp = datetime.now()
        line.text = text

    def touch(self) -> None:
        self.updated_at = datetime.now()

    def __repr__(self) -> str:
        return f"ScriptDocument(id={self.id!r}, title={self.title!r}, lines={len(self._lines)})"
