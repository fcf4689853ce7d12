"""
ScriptForge ID System

Opaque identifiers for lines, dual-dialogue groups and revision snapshots,
plus the ``v<N>`` revision number notation.

Identity is never positional: a line keeps its id across edits and
reorders, and a snapshot keeps its id after restores and deletions.

Format:
    Line:      line_{hex}     (e.g., line_3f2a9c...)
    Dual:      dual_{hex}     (e.g., dual_91bd04...)
    Snapshot:  rev_{hex}      (e.g., rev_c0ffee...)
    Document:  script_{hex}   (e.g., script_5e1f0a...)
    Revision:  v{N}           (e.g., v1, v2, v12)
"""

import re
import uuid
from enum import Enum
from typing import Optional

from .constants import REVISION_PREFIX


class IDType(Enum):
    """Type of identifier."""
    LINE = "line"
    DUAL = "dual"
    SNAPSHOT = "rev"
    DOCUMENT = "script"
    UNKNOWN = "unknown"


ID_PATTERN = re.compile(r'^(line|dual|rev|script)_([0-9a-f]{32})$')
REVISION_NUMBER_PATTERN = re.compile(rf'^{REVISION_PREFIX}(\d+)$')


def _new_id(id_type: IDType) -> str:
    return f"{id_type.value}_{uuid.uuid4().hex}"


def new_line_id() -> str:
    """Generate a fresh line id."""
    return _new_id(IDType.LINE)


def new_dual_id() -> str:
    """Generate a fresh dual-dialogue group id."""
    return _new_id(IDType.DUAL)


def new_snapshot_id() -> str:
    """Generate a fresh revision snapshot id."""
    return _new_id(IDType.SNAPSHOT)


def new_document_id() -> str:
    """Generate a fresh document id."""
    return _new_id(IDType.DOCUMENT)


def id_type_of(id_string: str) -> IDType:
    """Return the kind of a generated id, UNKNOWN for foreign ids."""
    match = ID_PATTERN.match(id_string or "")
    if not match:
        return IDType.UNKNOWN
    return IDType(match.group(1))


def format_revision_number(sequence_number: int) -> str:
    """Render a 1-based sequence number as ``v<N>``."""
    if sequence_number < 1:
        raise ValueError(f"Revision sequence numbers start at 1, got {sequence_number}")
    return f"{REVISION_PREFIX}{sequence_number}"


def parse_revision_number(revision_number: str) -> Optional[int]:
    """Parse ``v<N>`` back into N; None if it doesn't match."""
    match = REVISION_NUMBER_PATTERN.match((revision_number or "").strip())
    if not match:
        return None
    return int(match.group(1))
