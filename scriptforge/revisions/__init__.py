"""
ScriptForge Revisions Module

Linear snapshot history with restore, deletion and line-level diffing.
"""

from .diff_engine import DiffEntry, DiffType, diff, diff_lines, has_changes, summarize
from .storage import InMemoryRevisionBackend, JsonFileRevisionBackend, RevisionBackend, RevisionSnapshot
from .revision_store import RevisionStore

__all__ = [
    'DiffEntry',
    'DiffType',
    'diff',
    'diff_lines',
    'has_changes',
    'summarize',
    'InMemoryRevisionBackend',
    'JsonFileRevisionBackend',
    'RevisionBackend',
    'RevisionSnapshot',
    'RevisionStore',
]
