"""
Error taxonomy for command processing.

Every failure a user command can hit maps to one of these classes.
CommandSession catches them all and turns them into user-facing
messages; nothing in this hierarchy should crash the process.

    JarvisError
    ├── ProviderUnavailable   both AI backends failed or are unconfigured
    ├── MalformedIntent       model output is not usable JSON / bad amount
    ├── UnknownAction         action tag outside the five known ones
    ├── EntityNotFound        no existing event matched the reference
    └── CollaboratorError     finance/calendar backend rejected the call
"""

from typing import Any, List, Optional


class JarvisError(Exception):
    """Base exception for all command-processing errors."""
    pass


class ProviderUnavailable(JarvisError):
    """Raised when the primary and the fallback provider both failed."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class MalformedIntent(JarvisError):
    """Raised when extracted text is not valid JSON or a required field can't be coerced."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class UnknownAction(JarvisError):
    """Raised when the parsed JSON carries an unrecognized action tag."""

    def __init__(self, action: Any, confidence: float = 0.0):
        super().__init__(f"Unknown action: {action!r}")
        self.action = action
        self.confidence = confidence


class EntityNotFound(JarvisError):
    """Raised when a free-text reference matches no existing event."""

    def __init__(self, reference: str):
        super().__init__(f"No event matches reference: {reference!r}")
        self.reference = reference


class CollaboratorError(JarvisError):
    """Raised when an external collaborator call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
