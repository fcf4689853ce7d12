"""
ScriptForge Configuration Management

Centralized configuration system with JSON loading and validation.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError, InvalidConfigError
from .constants import (
    AUTO_TYPE_CONFIDENCE_THRESHOLD,
    DEFAULT_REVISION_COLOR,
    PROJECT_NAME,
    VERSION,
    ScriptMode,
)


@dataclass
class TextServiceConfig:
    """Configuration for the external text generation service."""
    url: str = "http://localhost:3001/api/ai"
    timeout: float = 60.0
    api_key_env: str = "SCRIPTFORGE_TEXT_API_KEY"  # Environment variable name for API key

    @classmethod
    def from_dict(cls, data: dict) -> 'TextServiceConfig':
        """Create TextServiceConfig from dictionary."""
        return cls(
            url=data.get('url', cls.url),
            timeout=float(data.get('timeout', cls.timeout)),
            api_key_env=data.get('api_key_env', cls.api_key_env)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'timeout': self.timeout,
            'api_key_env': self.api_key_env
        }


@dataclass
class EngineConfig:
    """Main configuration class for the ScriptForge engine."""

    project_name: str = PROJECT_NAME
    version: str = VERSION

    # Editing behaviour
    default_mode: ScriptMode = ScriptMode.FILM_TV
    auto_type_threshold: float = AUTO_TYPE_CONFIDENCE_THRESHOLD
    revision_color: str = DEFAULT_REVISION_COLOR

    # Revision history location; None keeps history in memory
    history_path: Optional[Path] = None

    text_service: TextServiceConfig = field(default_factory=TextServiceConfig)

    verbose_logging: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> 'EngineConfig':
        """Create EngineConfig from dictionary."""
        config = cls()

        config.project_name = data.get('project_name', config.project_name)
        config.version = data.get('version', config.version)
        config.revision_color = data.get('revision_color', config.revision_color)
        config.verbose_logging = data.get('verbose_logging', config.verbose_logging)

        if 'default_mode' in data:
            try:
                config.default_mode = ScriptMode(data['default_mode'])
            except ValueError:
                raise InvalidConfigError(
                    f"Unknown script mode: {data['default_mode']}",
                    {"valid_modes": [m.value for m in ScriptMode]}
                )

        if 'auto_type_threshold' in data:
            threshold = float(data['auto_type_threshold'])
            if not 0.0 <= threshold <= 1.0:
                raise InvalidConfigError(f"auto_type_threshold out of range: {threshold}")
            config.auto_type_threshold = threshold

        if data.get('history_path'):
            config.history_path = Path(data['history_path'])

        if 'text_service' in data:
            config.text_service = TextServiceConfig.from_dict(data['text_service'])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            'project_name': self.project_name,
            'version': self.version,
            'default_mode': self.default_mode.value,
            'auto_type_threshold': self.auto_type_threshold,
            'revision_color': self.revision_color,
            'history_path': str(self.history_path) if self.history_path else None,
            'text_service': self.text_service.to_dict(),
            'verbose_logging': self.verbose_logging
        }


def get_default_config() -> EngineConfig:
    """Get a fresh default configuration."""
    return EngineConfig()


def load_config(config_path: Path = None) -> EngineConfig:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file. If None, uses default.

    Returns:
        Loaded EngineConfig instance
    """
    if config_path is None:
        config_path = Path("config/scriptforge_config.json")
    config_path = Path(config_path)

    if not config_path.exists():
        return EngineConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return EngineConfig.from_dict(data)
    except json.JSONDecodeError as e:
        raise InvalidConfigError(f"Invalid JSON in config file: {e}")
    except ConfigurationError:
        raise
    except (OSError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Failed to load config: {e}")


def save_config(config: EngineConfig, config_path: Path) -> None:
    """Write configuration to a JSON file."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


# Global config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: EngineConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
