"""
Dispatch Result Types - Shared data structures for intent dispatch.

Kept in their own module so the dispatcher, the handlers and the
command session can all import them without circular imports.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class DispatchOutcome:
    """
    Result of dispatching one intent to a collaborator.

    The router returns this to the client; `message` is what the user
    sees (toast text).

    Attributes:
        success: Whether the collaborator call succeeded
        message: Human-readable result message (Portuguese)
        action: The intent action that was dispatched
        affected_entity_id: Id of the created/updated/deleted record
        requires_confirmation: True when the intent was held back by the
            confidence gate instead of being executed
        data: Record returned by the collaborator, if any
    """
    success: bool
    message: str = ""
    action: Optional[str] = None
    affected_entity_id: Optional[str] = None
    requires_confirmation: bool = False
    data: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for response."""
        return {
            "success": self.success,
            "message": self.message,
            "action": self.action,
            "affected_entity_id": self.affected_entity_id,
            "requires_confirmation": self.requires_confirmation,
            "data": self.data,
        }
