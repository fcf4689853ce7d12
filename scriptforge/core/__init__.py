"""
ScriptForge Core Module

Contains core systems including configuration, constants, exceptions, ids and logging.
"""

from .config import EngineConfig, TextServiceConfig, load_config, save_config, get_config, set_config
from .constants import *
from .exceptions import *
from .logging_config import setup_logging, setup_from_config, get_logger, LogLevel, LogContext

__all__ = [
    'EngineConfig',
    'TextServiceConfig',
    'load_config',
    'save_config',
    'get_config',
    'set_config',
    'setup_logging',
    'setup_from_config',
    'get_logger',
    'LogLevel',
    'LogContext',
]
