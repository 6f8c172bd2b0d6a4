"""
Exceptions raised by the opt-in layers of breeze_events.

The base emitter never raises on its own; these only come out of
TypedEventEmitter / EventSchema.
"""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError


class BreezeEventsError(Exception):
    """Base class for breeze_events errors"""
    pass


class UnknownEventError(BreezeEventsError):
    """Raised when an event id is not declared in the schema"""

    def __init__(self, event_id: Any):
        self.event_id = event_id
        super().__init__(f"Unknown event id: {event_id!r}")


class PayloadValidationError(BreezeEventsError):
    """Raised when emit() arguments do not match the declared payload shape"""

    def __init__(self, event_id: Any, cause: Optional[ValidationError] = None, message: Optional[str] = None):
        self.event_id = event_id
        self.cause = cause
        detail = message or (str(cause) if cause is not None else "invalid payload")
        super().__init__(f"Invalid payload for {event_id!r}: {detail}")

    @property
    def errors(self) -> List[Dict[str, Any]]:
        if self.cause is None:
            return []
        return self.cause.errors()
