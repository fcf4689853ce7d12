"""
ScriptForge Constants

Global constants used throughout the ScriptForge screenplay engine.
"""

from enum import Enum
from typing import Dict, List

# =============================================================================
# VERSION INFO
# =============================================================================
VERSION = "1.0.0"
PROJECT_NAME = "ScriptForge"

# =============================================================================
# ELEMENT TYPES
# =============================================================================

class ElementType(str, Enum):
    """Screenplay formatting category of a line."""
    SCENE = "scene"
    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    TRANSITION = "transition"
    SHOT = "shot"
    MONTAGE = "montage"
    INTERCUT = "intercut"
    GENERAL = "general"


# Tab-cycling ring (Tab forward, Shift+Tab reverse)
CYCLE_ORDER: List[ElementType] = [
    ElementType.SCENE,
    ElementType.ACTION,
    ElementType.CHARACTER,
    ElementType.DIALOGUE,
    ElementType.PARENTHETICAL,
    ElementType.TRANSITION,
    ElementType.SHOT,
]

# Ctrl/Cmd + digit shortcuts
SHORTCUT_TYPES: Dict[str, ElementType] = {
    "1": ElementType.SCENE,
    "2": ElementType.ACTION,
    "3": ElementType.CHARACTER,
    "4": ElementType.PARENTHETICAL,
    "5": ElementType.DIALOGUE,
    "6": ElementType.TRANSITION,
    "7": ElementType.SHOT,
}

# Types that may continue a character block
BLOCK_BODY_TYPES = {ElementType.DIALOGUE, ElementType.PARENTHETICAL}

# =============================================================================
# SCRIPT MODES
# =============================================================================

class ScriptMode(str, Enum):
    """Document layout modes; runtime estimation depends on the mode."""
    FILM_TV = "film_tv"
    STAGEPLAY = "stageplay"
    MULTI_COLUMN_AV = "multi_column_av"


class DualPosition(str, Enum):
    """Side of a dual-dialogue group."""
    LEFT = "left"
    RIGHT = "right"

# =============================================================================
# CLASSIFIER
# =============================================================================

# Auto-typing applies a classification only above this confidence
AUTO_TYPE_CONFIDENCE_THRESHOLD = 0.8

SCENE_TIMES = [
    "DAY", "NIGHT", "DAWN", "DUSK", "MORNING", "AFTERNOON", "EVENING",
    "LATER", "CONTINUOUS", "SAME TIME",
]

TRANSITIONS = [
    "CUT TO:", "FADE IN:", "FADE OUT.", "FADE TO BLACK.", "DISSOLVE TO:",
    "SMASH CUT TO:", "JUMP CUT TO:", "MATCH CUT TO:", "CROSS CUT TO:",
    "QUICK CUT TO:", "SLOW FADE TO:", "IRIS IN:", "IRIS OUT:",
]

SHOT_TERMS = [
    "CLOSE ON", "CLOSE-UP", "WIDE SHOT", "MEDIUM SHOT", "LONG SHOT",
    "EXTREME CLOSE-UP", "POV", "ANGLE ON", "INSERT", "CUTAWAY",
    "ESTABLISHING SHOT",
]

# =============================================================================
# PAGINATION & RUNTIME
# =============================================================================
#
# These constants reproduce existing exports and are not configurable.

LINES_PER_PAGE = 55
CHARS_PER_LINE = 60

# Types followed by a blank spacing line on the page
SPACED_TYPES = {ElementType.SCENE, ElementType.ACTION, ElementType.TRANSITION}
# Types that always occupy exactly one printed line
SINGLE_LINE_TYPES = {ElementType.CHARACTER, ElementType.PARENTHETICAL}

STAGEPLAY_MINUTES_PER_PAGE = 1.5
AV_WORDS_PER_MINUTE = 250

# Per-scene duration breakdown
SCENE_WORDS_PER_MINUTE: Dict[ScriptMode, int] = {
    ScriptMode.FILM_TV: 150,
    ScriptMode.STAGEPLAY: 120,
    ScriptMode.MULTI_COLUMN_AV: 180,
}
MIN_SCENE_DURATION = 0.5   # minutes
MAX_SCENE_DURATION = 10.0  # minutes
DIALOGUE_HEAVY_FACTOR = 0.8
ACTION_HEAVY_FACTOR = 1.2

# =============================================================================
# REVISIONS
# =============================================================================

REVISION_PREFIX = "v"
AUTO_SAVE_NOTE_PREFIX = "Auto-saved"
DEFAULT_SNAPSHOT_NOTES = "Manual save"
DEFAULT_REVISION_COLOR = "Blue"

# =============================================================================
# DOCUMENT DEFAULTS
# =============================================================================

DEFAULT_TITLE = "Untitled Script"
IMPORTED_TITLE = "Imported Script"

DEFAULT_SETTINGS = {
    "show_scene_numbers": False,
    "revision_mode": False,
    "page_size": "US_LETTER",
    "line_spacing": "STANDARD",
    "night_mode": False,
    "zoom": 100,
    "spellcheck": True,
    "page_numbering": True,
    "watermark": "",
    "header_text": "",
    "footer_text": "",
}

DEFAULT_TITLE_PAGE = {
    "layout": "default",
    "title": "",
    "subtitle": "",
    "author": "",
    "based_on": "",
    "contact": "",
    "draft_date": "",
}

# Title page keys understood by the plain-text interchange format
TITLE_PAGE_KEYS = {
    "title": "title",
    "author": "author",
    "contact": "contact",
    "draft date": "draft_date",
}
TITLE_PAGE_SEPARATOR = "==="
