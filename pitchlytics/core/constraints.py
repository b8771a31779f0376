"""Input constraints checked before any scoring work starts."""
from typing import List, Any

from ..models.schemas import PitchData
from .errors import MissingRequiredField

ENGINE_REQUIRED_FIELDS = ("title", "genre", "budget")


def validate_pitch(pitch: PitchData) -> None:
    """Validate that a pitch carries the attributes the engine needs.

    Raises:
        MissingRequiredField: If title, genre or budget is absent. A zero
            budget counts as absent.
    """
    missing = [name for name in ENGINE_REQUIRED_FIELDS if not getattr(pitch, name)]
    if missing:
        raise MissingRequiredField(
            "Missing required fields: title, genre, and budget are required",
            fields=missing,
        )


def validate_batch(pitches: Any, max_items: int = 10) -> List[Any]:
    """Reject a batch that is absent, empty or too large.

    Raises:
        MissingRequiredField: If the list is missing, empty or longer than
            ``max_items``.
    """
    if not pitches or not isinstance(pitches, list):
        raise MissingRequiredField("Pitches array is required")
    if len(pitches) > max_items:
        raise MissingRequiredField(f"Maximum {max_items} pitches per batch")
    return pitches
