"""
ScriptForge Services Module

Clients for external collaborators.
"""

from .text_service import HttpTextService, TextService, continue_script, reformat_text

__all__ = [
    'HttpTextService',
    'TextService',
    'continue_script',
    'reformat_text',
]
