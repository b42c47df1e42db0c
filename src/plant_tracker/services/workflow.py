"""Identification engine driving import sessions to a final state."""

import logging
from dataclasses import dataclass
from uuid import UUID

from plant_tracker.domain.auth import AuthContext
from plant_tracker.domain.identification import PlantIdentification
from plant_tracker.domain.import_sessions import (
    STATUS_COMPLETE,
    STATUS_FAILED,
    STATUS_NEEDS_SELECTION,
    STATUS_PENDING,
    STATUS_RESEARCHING,
    ImportSessionRecord,
)
from plant_tracker.errors import DownstreamError, StateConflictError, ValidationError
from plant_tracker.services.identification import IdentificationService
from plant_tracker.services.import_sessions import ImportSessionService
from plant_tracker.services.research import (
    CareResearchService,
    consolidate_care_requirements,
)

MAX_SUGGESTIONS = 5

_logger = logging.getLogger(__name__)


@dataclass
class IdentificationWorkflow:
    """Runs photo identification and post-selection care research."""

    sessions: ImportSessionService
    identification_service: IdentificationService
    research_service: CareResearchService
    confidence_threshold: float

    async def identify(
        self, auth: AuthContext, session_id: UUID, image_url: str | None
    ) -> ImportSessionRecord:
        """Identify the photo for a pending session."""
        session = self.sessions.get_session(auth, session_id)
        if session.status != STATUS_PENDING:
            raise StateConflictError("Session has already been identified")
        image_url = (image_url or session.image_url or "").strip()
        if not image_url:
            raise ValidationError("Image URL is required")
        if image_url != session.image_url:
            session = self.sessions.transition(
                auth, session, STATUS_PENDING, {"image_url": image_url}
            )

        try:
            result = await self.identification_service.identify(image_url)
        except Exception as exc:
            _logger.exception(
                "Plant identification failed: session_id=%s", session.id
            )
            self._record_failure(auth, session, f"Identification failed: {exc}")
            raise DownstreamError("Failed to identify plant") from exc

        if self._is_confident(result):
            session = self.sessions.transition(
                auth,
                session,
                STATUS_RESEARCHING,
                {
                    "identified_species": result.identified_species,
                    "scientific_name": result.scientific_name,
                    "confidence": result.confidence,
                    "suggestions": None,
                },
            )
            return await self._research_and_finalize(
                auth,
                session,
                str(result.identified_species),
                str(result.scientific_name),
            )

        suggestions = _suggestions(result)
        if not suggestions:
            return self._fail(
                auth, session, "No plant could be identified in the photo"
            )
        return self.sessions.transition(
            auth,
            session,
            STATUS_NEEDS_SELECTION,
            {"confidence": result.confidence, "suggestions": suggestions},
        )

    async def continue_research(
        self,
        auth: AuthContext,
        session_id: UUID,
        species: str | None,
        scientific_name: str | None,
    ) -> ImportSessionRecord:
        """Finish a session after a species has been committed.

        Calling this again for a session that already finished returns it
        unchanged.
        """
        species = (species or "").strip()
        scientific_name = (scientific_name or "").strip()
        if not species or not scientific_name:
            raise ValidationError(
                "Session ID, species, and scientific name are required"
            )
        session = self.sessions.get_session(auth, session_id)
        if session.is_terminal:
            _logger.info(
                "Continuation skipped: session_id=%s status=%s",
                session.id,
                session.status,
            )
            return session
        if session.status != STATUS_RESEARCHING:
            raise StateConflictError("Session is not awaiting research")
        return await self._research_and_finalize(
            auth, session, species, scientific_name
        )

    async def _research_and_finalize(
        self,
        auth: AuthContext,
        session: ImportSessionRecord,
        species: str,
        scientific_name: str,
    ) -> ImportSessionRecord:
        try:
            sources = await self.research_service.research(species, scientific_name)
            care = consolidate_care_requirements(sources)
        except Exception as exc:
            message = str(exc) or "Failed to continue identification"
            _logger.warning(
                "Care research failed: session_id=%s error=%s", session.id, message
            )
            self._record_failure(auth, session, message)
            raise DownstreamError(message) from exc
        return self.sessions.transition(
            auth,
            session,
            STATUS_COMPLETE,
            {
                "research_sources": [source.to_source() for source in sources],
                "care_requirements": care.model_dump(),
                "error_message": None,
            },
        )

    def _is_confident(self, result: PlantIdentification) -> bool:
        return (
            bool(result.identified_species)
            and bool(result.scientific_name)
            and result.confidence >= self.confidence_threshold
        )

    def _fail(
        self, auth: AuthContext, session: ImportSessionRecord, message: str
    ) -> ImportSessionRecord:
        return self.sessions.transition(
            auth, session, STATUS_FAILED, {"error_message": message}
        )

    def _record_failure(
        self, auth: AuthContext, session: ImportSessionRecord, message: str
    ) -> None:
        """Mark the session failed unless another request already moved it."""
        try:
            self._fail(auth, session, message)
        except StateConflictError:
            _logger.warning(
                "Could not record failure: session_id=%s error=%s", session.id, message
            )


def _suggestions(result: PlantIdentification) -> list[dict[str, object]]:
    """Return ordered candidates, falling back to the model's top guess."""
    candidates = [candidate.model_dump() for candidate in result.suggestions]
    if not candidates and result.identified_species:
        candidates.append(
            {
                "species": result.identified_species,
                "scientific_name": result.scientific_name or "",
                "confidence": result.confidence,
                "description": None,
            }
        )
    return candidates[:MAX_SUGGESTIONS]
