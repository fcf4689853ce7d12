"""
ScriptForge Custom Exceptions

Custom exception classes for error handling throughout the ScriptForge engine.

Mutating operations that reference a stale id degrade to a no-op; these
exceptions are raised by reads that must return a value and by the
collaborator boundaries.
"""


class ScriptForgeError(Exception):
    """Base exception for all ScriptForge errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(ScriptForgeError):
    """Raised when there's an issue with configuration."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""
    pass


# =============================================================================
# LOOKUP ERRORS
# =============================================================================

class NotFoundError(ScriptForgeError):
    """Raised when an operation references an id that does not exist."""
    pass


class LineNotFoundError(NotFoundError):
    """Raised when a line is not found in the document."""

    def __init__(self, line_id: str):
        message = f"Line not found: '{line_id}'"
        super().__init__(message, {"line_id": line_id})


class SnapshotNotFoundError(NotFoundError):
    """Raised when a revision snapshot is not found in the history."""

    def __init__(self, snapshot_id: str):
        message = f"Snapshot not found: '{snapshot_id}'"
        super().__init__(message, {"snapshot_id": snapshot_id})


# =============================================================================
# REVISION ERRORS
# =============================================================================

class EmptyHistoryError(ScriptForgeError):
    """Raised when a history operation leaves no current snapshot."""

    def __init__(self, operation: str):
        message = f"Revision history is empty after '{operation}'"
        super().__init__(message, {"operation": operation})


# =============================================================================
# DUAL DIALOGUE ERRORS
# =============================================================================

class InvalidDualTargetError(ScriptForgeError):
    """Raised when no eligible dialogue block exists to pair with."""

    def __init__(self, line_id: str, reason: str):
        message = f"Cannot form dual dialogue from '{line_id}': {reason}"
        super().__init__(message, {"line_id": line_id, "reason": reason})


# =============================================================================
# SERIALIZATION ERRORS
# =============================================================================

class SerializationError(ScriptForgeError):
    """Raised when serialized document content cannot be decoded."""
    pass


# =============================================================================
# COLLABORATOR ERRORS
# =============================================================================

class TextServiceError(ScriptForgeError):
    """Raised when the external text generation service fails."""

    def __init__(self, reason: str, status_code: int = None):
        message = f"Text service error: {reason}"
        details = {"reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code
