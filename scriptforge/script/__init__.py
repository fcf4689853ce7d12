"""
ScriptForge Script Module

Screenplay document model and the logic that works on it: line
classification, dual dialogue, metrics, serialization and plain-text
interchange.
"""

from .classifier import ClassificationResult, classify, cycle_type, format_line, next_type_after
from .document import Line, LineMeta, ScriptDocument
from .dual_dialogue import DualGroup, dissolve_orphan_groups, dual_groups, find_block, toggle_dual
from .metrics import (
    DurationSummary,
    OutlineEntry,
    SceneDuration,
    ScriptMetrics,
    compute_metrics,
    document_metrics,
    format_duration,
    scene_durations,
    scene_outline,
)
from .serialization import deserialize_document, document_from_dict, document_to_dict, serialize_document
from .fountain import export_fountain, import_fountain

__all__ = [
    # Classifier
    'ClassificationResult',
    'classify',
    'cycle_type',
    'format_line',
    'next_type_after',
    # Document
    'Line',
    'LineMeta',
    'ScriptDocument',
    # Dual dialogue
    'DualGroup',
    'dissolve_orphan_groups',
    'dual_groups',
    'find_block',
    'toggle_dual',
    # Metrics
    'DurationSummary',
    'OutlineEntry',
    'SceneDuration',
    'ScriptMetrics',
    'compute_metrics',
    'document_metrics',
    'format_duration',
    'scene_durations',
    'scene_outline',
    # Serialization
    'deserialize_document',
    'document_from_dict',
    'document_to_dict',
    'serialize_document',
    'export_fountain',
    'import_fountain',
]
