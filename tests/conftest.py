"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Any

from scriptforge.core.config import set_config
from scriptforge.core.constants import ElementType
from scriptforge.script.document import Line, ScriptDocument


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the global config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Sample configuration for testing."""
    return {
        "project_name": "ScriptForge",
        "version": "1.0.0",
        "default_mode": "stageplay",
        "auto_type_threshold": 0.75,
        "revision_color": "Pink",
        "text_service": {
            "url": "http://localhost:9999/api/ai",
            "timeout": 5,
            "api_key_env": "TEST_TEXT_KEY"
        }
    }


@pytest.fixture
def sample_lines() -> list:
    """Two-scene screenplay fragment as (type, text) pairs."""
    return [
        (ElementType.SCENE, "INT. OFFICE - DAY"),
        (ElementType.ACTION, "John enters."),
        (ElementType.CHARACTER, "JOHN"),
        (ElementType.DIALOGUE, "Hello."),
        (ElementType.SCENE, "EXT. STREET - NIGHT"),
    ]


def build_document(pairs, **kwargs) -> ScriptDocument:
    """Build a document with predictable line ids l0, l1, ..."""
    lines = [Line(id=f"l{i}", type=t, text=text) for i, (t, text) in enumerate(pairs)]
    return ScriptDocument(lines=lines, **kwargs)


@pytest.fixture
def make_document():
    """Factory fixture: make_document([(type, text), ...], **kwargs)."""
    return build_document


@pytest.fixture
def sample_document(sample_lines) -> ScriptDocument:
    """Document built from sample_lines with ids l0..l4."""
    return build_document(sample_lines, title="Sample")


@pytest.fixture
def dialogue_document() -> ScriptDocument:
    """Two consecutive dialogue blocks, ready for dual dialogue."""
    return build_document([
        (ElementType.SCENE, "INT. KITCHEN - NIGHT"),
        (ElementType.CHARACTER, "ALICE"),
        (ElementType.DIALOGUE, "Did you hear that?"),
        (ElementType.CHARACTER, "BOB"),
        (ElementType.PARENTHETICAL, "(whispering)"),
        (ElementType.DIALOGUE, "Hear what?"),
        (ElementType.ACTION, "A door creaks."),
    ])
