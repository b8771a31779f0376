"""Error taxonomy for the validation engine.

Every error carries the HTTP status the API layer should answer with, so
handlers can translate exceptions without inspecting message text.
"""
from dataclasses import dataclass


class ValidationEngineError(Exception):
    """Base class for all engine errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingRequiredField(ValidationEngineError):
    """Caller input is incomplete or malformed."""

    status_code = 400

    def __init__(self, message: str, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class NotFound(ValidationEngineError):
    status_code = 404


class ScoreNotFound(NotFound):
    """No cached score for the pitch. Never triggers a recompute."""

    def __init__(self, pitch_id: str):
        super().__init__("Validation score not found. Please run analysis first.")
        self.pitch_id = pitch_id


class ComputationFailure(ValidationEngineError):
    """The score computation engine raised."""

    status_code = 500


@dataclass
class BatchPartialFailure:
    """One failed entry of a batch run, reported next to the successes."""
    index: int
    reason: str
