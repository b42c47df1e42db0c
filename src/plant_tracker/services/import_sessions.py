"""Owner-scoped import session lifecycle."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from plant_tracker.domain.auth import AuthContext
from plant_tracker.domain.import_sessions import (
    EDITABLE_FIELDS,
    STATUS_PENDING,
    USER_SETTABLE_STATUSES,
    ImportSessionRecord,
    is_forward_transition,
)
from plant_tracker.errors import NotFoundError, StateConflictError, ValidationError

_logger = logging.getLogger(__name__)


class ImportSessionRepository(Protocol):
    """Persistence interface for import sessions.

    Every method is scoped by owner; a session owned by someone else is
    reported exactly like a missing one.
    """

    def list_sessions(self, user_id: UUID) -> list[ImportSessionRecord]:
        """Return the owner's sessions, newest first."""

    def get_session(
        self, session_id: UUID, user_id: UUID
    ) -> ImportSessionRecord | None:
        """Return a session by id, if present and owned."""

    def create_session(
        self, user_id: UUID, fields: dict[str, object]
    ) -> ImportSessionRecord:
        """Create a session row and return it."""

    def update_session(
        self, session_id: UUID, user_id: UUID, fields: dict[str, object]
    ) -> ImportSessionRecord | None:
        """Apply a partial update and return the updated session."""

    def update_session_if_status(
        self,
        session_id: UUID,
        user_id: UUID,
        expected_status: str,
        fields: dict[str, object],
    ) -> ImportSessionRecord | None:
        """Apply an update only while the session has the expected status."""

    def delete_session(self, session_id: UUID, user_id: UUID) -> bool:
        """Delete a session and report whether a row was removed."""


@dataclass
class ImportSessionService:
    """Application service for import session CRUD and transitions."""

    repository: ImportSessionRepository

    def list_sessions(self, auth: AuthContext) -> list[ImportSessionRecord]:
        return self.repository.list_sessions(auth.user_id)

    def create_session(
        self, auth: AuthContext, image_url: str | None = None
    ) -> ImportSessionRecord:
        """Create a pending session for the caller."""
        session = self.repository.create_session(
            auth.user_id,
            {"status": STATUS_PENDING, "image_url": image_url},
        )
        _logger.info("Import session created: session_id=%s", session.id)
        return session

    def get_session(self, auth: AuthContext, session_id: UUID) -> ImportSessionRecord:
        """Return an owned session or raise NotFoundError."""
        session = self.repository.get_session(session_id, auth.user_id)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def update_session(
        self, auth: AuthContext, session_id: UUID, changes: dict[str, object]
    ) -> ImportSessionRecord:
        """Apply a user edit restricted to editable fields."""
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
        if "status" in changes and changes["status"] not in USER_SETTABLE_STATUSES:
            raise ValidationError("Status can only be changed to failed")
        current = self.get_session(auth, session_id)
        if "status" in changes:
            return self.transition(
                auth, current, str(changes["status"]), {**changes, "suggestions": None}
            )
        if current.is_terminal:
            raise StateConflictError(f"Session is already {current.status}")
        updated = self.repository.update_session(
            session_id, auth.user_id, {**changes, "updated_at": _now()}
        )
        if updated is None:
            raise NotFoundError("Session not found")
        return updated

    def delete_session(self, auth: AuthContext, session_id: UUID) -> None:
        if not self.repository.delete_session(session_id, auth.user_id):
            raise NotFoundError("Session not found")
        _logger.info("Import session deleted: session_id=%s", session_id)

    def transition(
        self,
        auth: AuthContext,
        session: ImportSessionRecord,
        status: str,
        fields: dict[str, object] | None = None,
    ) -> ImportSessionRecord:
        """Move a session forward, guarded by its currently observed status."""
        if not is_forward_transition(session.status, status):
            raise StateConflictError(
                f"Cannot move session from {session.status} to {status}"
            )
        payload = dict(fields or {})
        payload["status"] = status
        payload["updated_at"] = _now()
        updated = self.repository.update_session_if_status(
            session.id, auth.user_id, session.status, payload
        )
        if updated is None:
            raise StateConflictError("Session was modified by another request")
        if session.status != status:
            _logger.info(
                "Import session transition: session_id=%s %s -> %s",
                session.id,
                session.status,
                status,
            )
        return updated


def _now() -> datetime:
    return datetime.now(tz=UTC)
