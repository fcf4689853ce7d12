"""
ScriptForge Line Classifier

Infers a line's screenplay element type from free-form text as the user
types, and normalizes text per type for display and save.

Classification is a best-effort heuristic: each rule is a pattern test
against the trimmed text, evaluated in order, first match wins. The result
carries a confidence score; whether to apply it is the caller's decision.
"""

import re
from dataclasses import dataclass
from typing import Optional

from scriptforge.core.constants import (
    CYCLE_ORDER,
    SCENE_TIMES,
    SHOT_TERMS,
    TRANSITIONS,
    ElementType,
)


def _alternation(terms) -> str:
    return "|".join(re.escape(t) for t in terms)


SCENE_PATTERN = re.compile(
    rf"^(INT\.?/EXT|INT|EXT)\.?\s+.+\s+[-–]\s+({_alternation(SCENE_TIMES)})\s*\.?$",
    re.IGNORECASE,
)
CHARACTER_PATTERN = re.compile(r"^[A-Z][A-Z0-9\s#@.'()-]{1,29}$")
TRANSITION_PATTERN = re.compile(rf"^({_alternation(TRANSITIONS)})$", re.IGNORECASE)
PARENTHETICAL_PATTERN = re.compile(r"^\s*\(.{1,30}\)\s*$")
SHOT_PATTERN = re.compile(rf"^({_alternation(SHOT_TERMS)})", re.IGNORECASE)
MONTAGE_PATTERN = re.compile(r"^MONTAGE\s*[-–]\s*.+$", re.IGNORECASE)
INTERCUT_PATTERN = re.compile(r"^INTERCUT\s*[-–]\s*.+$", re.IGNORECASE)

# Previous-line types after which free text reads as dialogue
_DIALOGUE_CONTEXT = {ElementType.CHARACTER, ElementType.PARENTHETICAL, ElementType.DIALOGUE}


@dataclass(frozen=True)
class ClassificationResult:
    """Inferred type and self-reported certainty in [0, 1]."""
    type: ElementType
    confidence: float

    def to_dict(self) -> dict:
        return {"type": self.type.value, "confidence": self.confidence}


def classify(text: str, previous_type: Optional[ElementType] = None) -> ClassificationResult:
    """
    Infer the element type of a line.

    Args:
        text: Raw line text
        previous_type: Type of the line immediately before, if any

    Returns:
        ClassificationResult with the inferred type and confidence
    """
    trimmed = (text or "").strip()

    if not trimmed:
        return ClassificationResult(ElementType.GENERAL, 1.0)

    if SCENE_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.SCENE, 0.95)

    if TRANSITION_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.TRANSITION, 0.9)

    if PARENTHETICAL_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.PARENTHETICAL, 0.85)

    if (CHARACTER_PATTERN.match(trimmed)
            and not trimmed.endswith("TO:")
            and previous_type not in (ElementType.CHARACTER, ElementType.DIALOGUE)):
        return ClassificationResult(ElementType.CHARACTER, 0.8)

    if SHOT_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.SHOT, 0.75)

    if MONTAGE_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.MONTAGE, 0.9)

    if INTERCUT_PATTERN.match(trimmed):
        return ClassificationResult(ElementType.INTERCUT, 0.9)

    # trimmed is non-empty here, so a dialogue predecessor always continues
    if previous_type in _DIALOGUE_CONTEXT:
        return ClassificationResult(ElementType.DIALOGUE, 0.7)

    return ClassificationResult(ElementType.ACTION, 0.6)


def format_line(element_type: ElementType, text: str) -> str:
    """
    Normalize casing and punctuation of a line for its type.

    Applied on display/save, not on every keystroke.
    """
    trimmed = (text or "").strip()

    if element_type in (ElementType.SCENE, ElementType.TRANSITION):
        return trimmed.upper()

    if element_type == ElementType.CHARACTER:
        name = trimmed.upper()
        if "(" in name:
            head, _, extension = name.partition("(")
            name = f"{head.strip()} ({extension}"
        return name

    if element_type == ElementType.PARENTHETICAL:
        wrapped = trimmed
        if not wrapped.startswith("("):
            wrapped = "(" + wrapped
        if not wrapped.endswith(")"):
            wrapped = wrapped + ")"
        return wrapped.lower()

    return trimmed


def next_type_after(current_type: ElementType, is_double_enter: bool = False) -> ElementType:
    """
    Default type for the line created when the user commits a line (Enter).

    Args:
        current_type: Type of the line being committed
        is_double_enter: True when an empty dialogue line was committed

    Returns:
        Type for the new line
    """
    if current_type == ElementType.CHARACTER:
        return ElementType.DIALOGUE
    if current_type == ElementType.DIALOGUE:
        return ElementType.ACTION if is_double_enter else ElementType.DIALOGUE
    if current_type == ElementType.PARENTHETICAL:
        return ElementType.DIALOGUE
    if current_type == ElementType.TRANSITION:
        return ElementType.SCENE
    # scene, action, shot, montage, intercut, general
    return ElementType.ACTION


def cycle_type(current_type: ElementType, reverse: bool = False) -> ElementType:
    """Step through the Tab-cycling ring, wrapping at either end."""
    try:
        index = CYCLE_ORDER.index(current_type)
    except ValueError:
        # Types outside the ring start from before the first entry
        index = -1
    step = -1 if reverse else 1
    return CYCLE_ORDER[(index + step) % len(CYCLE_ORDER)]
