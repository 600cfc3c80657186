"""Service-layer business logic."""

from .exceptions import IntakeError, InvalidPayload
from .intake import IntakeCoordinator
from .models import (
    Accepted,
    Failed,
    Outcome,
    PendingCapture,
    Rejected,
    TriggerPayload,
    validate_payload,
)

__all__ = [
    "Accepted",
    "Failed",
    "IntakeCoordinator",
    "IntakeError",
    "InvalidPayload",
    "Outcome",
    "PendingCapture",
    "Rejected",
    "TriggerPayload",
    "validate_payload",
]
