"""
ScriptForge Plain-Text Interchange

Flattens a document to Fountain-style plain-text markup and rebuilds a
document from it on a best-effort basis.

Export conventions:
    - optional title page preamble (``Key: value`` lines) closed by ``===``
    - scene headings, character names and transitions uppercased
    - transitions prefixed with ``> ``
    - parentheticals wrapped in parentheses
    - a blank line after every block

Known limitation: line metadata has no plain-text representation. Manual
type flags, dual-dialogue links and revision colors (LOSSY_META_FIELDS) do
not survive an export/import cycle, and imported lines carry empty meta.
"""

from typing import Dict, List, Optional, Tuple

from scriptforge.core.constants import (
    BLOCK_BODY_TYPES,
    IMPORTED_TITLE,
    TITLE_PAGE_KEYS,
    TITLE_PAGE_SEPARATOR,
    ElementType,
)
from scriptforge.core.id_system import new_line_id
from scriptforge.core.logging_config import get_logger
from scriptforge.script.classifier import classify
from scriptforge.script.document import Line, LineMeta, ScriptDocument

logger = get_logger("script.fountain")

LOSSY_META_FIELDS = (
    "manual_type",
    "dual_id",
    "dual_position",
    "revision_color",
    "revision_timestamp",
)

TRANSITION_MARKER = "> "

# Export labels, in preamble order
_TITLE_PAGE_LABELS = [
    ("title", "Title"),
    ("author", "Author"),
    ("contact", "Contact"),
    ("draft_date", "Draft date"),
]


def _has_meta(line: Line) -> bool:
    return line.meta != LineMeta()


def _render_line(line: Line) -> str:
    if line.type in (ElementType.SCENE, ElementType.CHARACTER):
        return line.text.strip().upper()
    if line.type == ElementType.TRANSITION:
        return TRANSITION_MARKER + line.text.strip().upper()
    if line.type == ElementType.PARENTHETICAL:
        wrapped = line.text.strip()
        if not wrapped.startswith("("):
            wrapped = "(" + wrapped
        if not wrapped.endswith(")"):
            wrapped += ")"
        return wrapped
    return line.text


def _ends_block(line: Line, next_line: Optional[Line]) -> bool:
    if line.type == ElementType.CHARACTER or line.type in BLOCK_BODY_TYPES:
        return next_line is None or next_line.type not in BLOCK_BODY_TYPES
    return True


def export_fountain(document: ScriptDocument) -> str:
    """
    Flatten a document to plain-text markup.

    Args:
        document: Document to export

    Returns:
        Fountain-style text
    """
    parts: List[str] = []

    preamble = [
        f"{label}: {document.title_page[key]}"
        for key, label in _TITLE_PAGE_LABELS
        if document.title_page.get(key)
    ]
    if preamble:
        parts.extend(preamble)
        parts.append("")
        parts.append(TITLE_PAGE_SEPARATOR)
        parts.append("")

    lines = document.lines
    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else None
        parts.append(_render_line(line))
        if _ends_block(line, next_line):
            parts.append("")

    dropped = sum(1 for line in lines if _has_meta(line))
    if dropped:
        logger.warning(f"Plain-text export drops line metadata on {dropped} line(s): {', '.join(LOSSY_META_FIELDS)}")

    return "\n".join(parts)


def _split_title_page(raw_lines: List[str]) -> Tuple[Dict[str, str], List[str]]:
    """Separate a ``Key: value`` preamble closed by ``===`` from the body."""
    stripped = [raw.strip() for raw in raw_lines]
    if TITLE_PAGE_SEPARATOR not in stripped:
        return {}, raw_lines

    separator = stripped.index(TITLE_PAGE_SEPARATOR)
    preamble = [s for s in stripped[:separator] if s]
    if not all(":" in s for s in preamble):
        return {}, raw_lines

    title_page: Dict[str, str] = {}
    for entry in preamble:
        key, _, value = entry.partition(":")
        field_name = TITLE_PAGE_KEYS.get(key.strip().lower())
        if field_name:
            title_page[field_name] = value.strip()
    return title_page, raw_lines[separator + 1:]


def import_fountain(text: str) -> ScriptDocument:
    """
    Rebuild a document from plain-text markup.

    Each paragraph (run of non-blank lines) is typed line by line with the
    classifier, the previous line's type resetting at every blank line.

    Args:
        text: Fountain-style text

    Returns:
        New ScriptDocument; lines carry empty meta
    """
    title_page, body = _split_title_page((text or "").split("\n"))

    lines: List[Line] = []
    previous_type: Optional[ElementType] = None
    for raw in body:
        trimmed = raw.strip()
        if not trimmed:
            previous_type = None
            continue

        if trimmed.startswith(TRANSITION_MARKER):
            element_type = ElementType.TRANSITION
            trimmed = trimmed[len(TRANSITION_MARKER):].strip()
        else:
            element_type = classify(trimmed, previous_type).type

        lines.append(Line(id=new_line_id(), type=element_type, text=trimmed))
        previous_type = element_type

    logger.info(f"Imported {len(lines)} lines from plain text; line metadata is not representable and starts empty")

    return ScriptDocument(
        lines=lines,
        title=title_page.get("title") or IMPORTED_TITLE,
        title_page=title_page,
    )
