"""
ScriptForge Dual-Dialogue Linker

Groups two character blocks as simultaneous speech. A group is not stored
anywhere on its own: it is every line sharing the same ``meta.dual_id``,
split into a left and a right side by ``meta.dual_position``.

A block is a character line followed by its dialogue and parenthetical
lines; any other type ends it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from scriptforge.core.constants import BLOCK_BODY_TYPES, DualPosition, ElementType
from scriptforge.core.exceptions import InvalidDualTargetError
from scriptforge.core.id_system import new_dual_id
from scriptforge.core.logging_config import get_logger
from scriptforge.script.document import Line, ScriptDocument

logger = get_logger("script.dual_dialogue")

# Line types that stop the forward search for a partner block
_SEARCH_STOP_TYPES = {ElementType.SCENE, ElementType.ACTION}


@dataclass
class DualGroup:
    """Lines sharing one dual id, by side."""
    dual_id: str
    left: List[str] = field(default_factory=list)
    right: List[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return bool(self.left) and bool(self.right)

    @property
    def line_ids(self) -> List[str]:
        return self.left + self.right


def _block_from(lines: Tuple[Line, ...], start: int) -> List[Line]:
    block = [lines[start]]
    for line in lines[start + 1:]:
        if line.type not in BLOCK_BODY_TYPES:
            break
        block.append(line)
    return block


def find_block(document: ScriptDocument, line_id: str) -> List[Line]:
    """
    Return the character block containing a line.

    Walks back from the line through dialogue/parenthetical lines to the
    character line that opens the block. Empty when the line is unknown or
    no character line opens its block.
    """
    lines = document.lines
    index = document.index_of(line_id)
    if index < 0:
        return []

    while index >= 0 and lines[index].type in BLOCK_BODY_TYPES:
        index -= 1
    if index < 0 or lines[index].type != ElementType.CHARACTER:
        return []
    return _block_from(lines, index)


def _find_partner_block(document: ScriptDocument, line_id: str) -> List[Line]:
    lines = document.lines
    for index in range(document.index_of(line_id) + 1, len(lines)):
        line_type = lines[index].type
        if line_type == ElementType.CHARACTER:
            return _block_from(lines, index)
        if line_type in _SEARCH_STOP_TYPES:
            break
    return []


def require_dual_pair(document: ScriptDocument, line_id: str) -> Tuple[List[Line], List[Line]]:
    """
    Locate the (left, right) blocks a toggle on this line would link.

    Raises:
        InvalidDualTargetError: If either block can't be found
    """
    if line_id not in document:
        raise InvalidDualTargetError(line_id, "line does not exist")

    own_block = find_block(document, line_id)
    if not own_block:
        raise InvalidDualTargetError(line_id, "no character line opens this block")

    partner = _find_partner_block(document, own_block[-1].id)
    if not partner:
        raise InvalidDualTargetError(line_id, "no following character block before the next scene or action")

    return own_block, partner


def toggle_dual(document: ScriptDocument, line_id: str) -> Optional[str]:
    """
    Link or unlink the dual dialogue around a line.

    If the line already belongs to a group the whole group is dissolved.
    Otherwise its block is paired with the next character block; when no
    pair can be formed nothing changes.

    Args:
        document: Document to modify
        line_id: Line the user toggled on

    Returns:
        The new group id, or None if a group was dissolved or nothing changed
    """
    line = document.find_line(line_id)
    if line is None:
        logger.debug(f"toggle_dual ignored for unknown line {line_id}")
        return None

    if line.meta.dual_id is not None:
        dissolve_group(document, line.meta.dual_id)
        return None

    try:
        left, right = require_dual_pair(document, line_id)
    except InvalidDualTargetError as e:
        logger.debug(str(e))
        return None

    dual_id = new_dual_id()
    for block_line in left:
        block_line.meta.dual_id = dual_id
        block_line.meta.dual_position = DualPosition.LEFT
    for block_line in right:
        block_line.meta.dual_id = dual_id
        block_line.meta.dual_position = DualPosition.RIGHT

    # The partner block may have been taken from an existing group
    dissolve_orphan_groups(document)
    document.touch()
    logger.debug(f"Linked dual dialogue {dual_id}: {len(left)} left, {len(right)} right")
    return dual_id


def dissolve_group(document: ScriptDocument, dual_id: str) -> int:
    """Clear dual tags on every line of a group; returns the number of lines cleared."""
    cleared = 0
    for line in document.lines:
        if line.meta.dual_id == dual_id:
            line.meta.clear_dual()
            cleared += 1
    if cleared:
        document.touch()
        logger.debug(f"Dissolved dual dialogue {dual_id} ({cleared} lines)")
    return cleared


def dual_groups(document: ScriptDocument) -> Dict[str, DualGroup]:
    """Derive all dual groups from line metadata, in document order."""
    groups: Dict[str, DualGroup] = {}
    for line in document.lines:
        dual_id = line.meta.dual_id
        if dual_id is None:
            continue
        group = groups.setdefault(dual_id, DualGroup(dual_id=dual_id))
        if line.meta.dual_position == DualPosition.RIGHT:
            group.right.append(line.id)
        else:
            group.left.append(line.id)
    return groups


def dissolve_orphan_groups(document: ScriptDocument) -> List[str]:
    """
    Dissolve groups missing a side, e.g. after lines were deleted.

    Returns:
        Ids of the dissolved groups
    """
    dissolved = []
    for dual_id, group in dual_groups(document).items():
        if not group.is_active:
            dissolve_group(document, dual_id)
            dissolved.append(dual_id)
    return dissolved
