"""Custom exceptions for trigger intake."""


class IntakeError(Exception):
    """Base exception for trigger intake failures."""


class InvalidPayload(IntakeError):
    """Raised when a trigger payload lacks a non-empty key or description."""
