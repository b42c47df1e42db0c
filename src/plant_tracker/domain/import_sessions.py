"""Domain models for plant import sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

STATUS_PENDING = "pending"
STATUS_NEEDS_SELECTION = "needs_selection"
STATUS_RESEARCHING = "researching"
STATUS_COMPLETE = "complete"
STATUS_FAILED = "failed"

TERMINAL_STATUSES = frozenset({STATUS_COMPLETE, STATUS_FAILED})

_STATUS_RANK = {
    STATUS_PENDING: 0,
    STATUS_NEEDS_SELECTION: 1,
    STATUS_RESEARCHING: 2,
    STATUS_COMPLETE: 3,
    STATUS_FAILED: 3,
}

# Confidence recorded when the species comes from the user rather than the model.
USER_CONFIRMED_CONFIDENCE = 0.7

EDITABLE_FIELDS = frozenset({"image_url", "error_message", "status"})

# Users may only cancel a session; every other status change belongs to the
# selection step or the identification engine.
USER_SETTABLE_STATUSES = frozenset({STATUS_FAILED})


@dataclass(frozen=True)
class ImportSessionRecord:
    """Represents a persisted plant import session."""

    id: UUID
    user_id: UUID
    status: str
    image_url: str | None = None
    identified_species: str | None = None
    scientific_name: str | None = None
    confidence: float | None = None
    suggestions: list[dict[str, object]] | None = None
    research_sources: list[dict[str, object]] | None = None
    care_requirements: dict[str, object] | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "status": self.status,
            "image_url": self.image_url,
            "identified_species": self.identified_species,
            "scientific_name": self.scientific_name,
            "confidence": self.confidence,
            "suggestions": self.suggestions,
            "research_sources": self.research_sources or [],
            "care_requirements": self.care_requirements,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def is_known_status(status: str) -> bool:
    return status in _STATUS_RANK


def is_forward_transition(current: str, target: str) -> bool:
    """Return true when moving from current to target never goes backward.

    A session in a terminal state accepts no further writes.
    """
    if not is_known_status(current) or not is_known_status(target):
        return False
    if current in TERMINAL_STATUSES:
        return False
    return _STATUS_RANK[target] >= _STATUS_RANK[current]
