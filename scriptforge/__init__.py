"""
ScriptForge - Screenplay Editing Engine

Structured screenplay documents made of typed lines, with heuristic line
classification, dual-dialogue grouping, production metrics and a linear
revision history with line-level diffs.

Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "ScriptForge Team"
__project__ = "ScriptForge"

from pathlib import Path

# Load environment variables early - the text service reads its API key from them
from scriptforge.core.env_loader import ensure_env_loaded
ensure_env_loaded()

# Package root directory
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

from .core.constants import ElementType, ScriptMode, DualPosition
from .script import ScriptDocument, classify, compute_metrics, toggle_dual
from .revisions import RevisionStore, diff
from .editor import ScriptEditor

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__project__",
    # Paths
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
    # Core types
    "ElementType",
    "ScriptMode",
    "DualPosition",
    # Engine
    "ScriptDocument",
    "ScriptEditor",
    "classify",
    "compute_metrics",
    "toggle_dual",
    "RevisionStore",
    "diff",
]
