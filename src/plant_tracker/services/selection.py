"""User species selection for sessions awaiting disambiguation."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from plant_tracker.domain.auth import AuthContext
from plant_tracker.domain.import_sessions import (
    STATUS_NEEDS_SELECTION,
    STATUS_RESEARCHING,
    USER_CONFIRMED_CONFIDENCE,
)
from plant_tracker.errors import StateConflictError, ValidationError
from plant_tracker.services.import_sessions import ImportSessionService

_logger = logging.getLogger(__name__)


class ContinuationClient(Protocol):
    """Interface for resuming the identification engine after a selection."""

    async def continue_identification(
        self,
        auth: AuthContext,
        session_id: UUID,
        species: str,
        scientific_name: str,
    ) -> None:
        """Trigger the continuation; raise DownstreamError on failure."""


@dataclass(frozen=True)
class SelectionReceipt:
    """Committed selection that can be handed to the engine, or handed again."""

    session_id: UUID
    species: str
    scientific_name: str


@dataclass
class SelectionService:
    """Commits a user's species choice and resumes the engine.

    ``commit`` moves the session to ``researching`` with a compare-and-swap on
    ``needs_selection`` and ``trigger`` calls the continuation. A failed
    trigger leaves the commit in place; ``resume`` re-triggers from the
    persisted session.
    """

    sessions: ImportSessionService
    continuation_client: ContinuationClient

    async def select(
        self,
        auth: AuthContext,
        session_id: UUID,
        species: str | None,
        scientific_name: str | None,
    ) -> SelectionReceipt:
        """Commit the selection, then trigger the continuation."""
        receipt = self.commit(auth, session_id, species, scientific_name)
        await self.trigger(auth, receipt)
        return receipt

    def commit(
        self,
        auth: AuthContext,
        session_id: UUID,
        species: str | None,
        scientific_name: str | None,
    ) -> SelectionReceipt:
        """Validate and persist the selection."""
        species = (species or "").strip()
        scientific_name = (scientific_name or "").strip()
        if not species or not scientific_name:
            raise ValidationError("Species and scientific name are required")

        session = self.sessions.get_session(auth, session_id)
        if session.status != STATUS_NEEDS_SELECTION:
            _logger.warning(
                "Selection rejected: session_id=%s status=%s",
                session_id,
                session.status,
            )
            raise StateConflictError("Session is not awaiting selection")

        try:
            self.sessions.transition(
                auth,
                session,
                STATUS_RESEARCHING,
                {
                    "identified_species": species,
                    "scientific_name": scientific_name,
                    "confidence": USER_CONFIRMED_CONFIDENCE,
                    "suggestions": None,
                },
            )
        except StateConflictError as exc:
            raise StateConflictError("Session is not awaiting selection") from exc
        return SelectionReceipt(
            session_id=session_id, species=species, scientific_name=scientific_name
        )

    async def trigger(self, auth: AuthContext, receipt: SelectionReceipt) -> None:
        """Hand a committed selection to the engine continuation."""
        await self.continuation_client.continue_identification(
            auth,
            receipt.session_id,
            receipt.species,
            receipt.scientific_name,
        )
        _logger.info("Continuation triggered: session_id=%s", receipt.session_id)

    async def resume(self, auth: AuthContext, session_id: UUID) -> SelectionReceipt:
        """Re-trigger the continuation for a session parked in researching."""
        session = self.sessions.get_session(auth, session_id)
        if session.status != STATUS_RESEARCHING:
            raise StateConflictError("Session is not awaiting research")
        if not session.identified_species or not session.scientific_name:
            raise StateConflictError("Session has no selected species")
        receipt = SelectionReceipt(
            session_id=session.id,
            species=session.identified_species,
            scientific_name=session.scientific_name,
        )
        await self.trigger(auth, receipt)
        return receipt
