"""Import session endpoints scoped to the authenticated user."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from plant_tracker.api.dependencies import get_container, require_user
from plant_tracker.api.schemas import CreateImportSessionRequest, SelectSpeciesRequest
from plant_tracker.containers import AppContainer
from plant_tracker.domain.auth import AuthContext

router = APIRouter(prefix="/api/import-sessions", tags=["import-sessions"])


@router.get("")
async def list_import_sessions(
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> list[dict[str, object]]:
    """Return the caller's import sessions, newest first."""
    sessions = container.import_session_service.list_sessions(auth)
    return [session.to_dict() for session in sessions]


@router.post("")
async def create_import_session(
    body: CreateImportSessionRequest,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a pending import session."""
    session = container.import_session_service.create_session(auth, body.image_url)
    return session.to_dict()


@router.get("/{session_id}")
async def get_import_session(
    session_id: UUID,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return container.import_session_service.get_session(auth, session_id).to_dict()


@router.patch("/{session_id}")
async def update_import_session(
    session_id: UUID,
    changes: dict[str, Any] = Body(...),
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Edit user-editable fields of a session."""
    session = container.import_session_service.update_session(
        auth, session_id, changes
    )
    return session.to_dict()


@router.delete("/{session_id}")
async def delete_import_session(
    session_id: UUID,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.import_session_service.delete_session(auth, session_id)
    return {"success": True}


@router.post("/{session_id}/select")
async def select_species(
    session_id: UUID,
    body: SelectSpeciesRequest,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Commit the user's species choice and resume identification."""
    await container.selection_service.select(
        auth, session_id, body.species, body.scientific_name
    )
    return {"success": True}


@router.post("/{session_id}/resume")
async def resume_identification(
    session_id: UUID,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Re-trigger the continuation for a session left in researching."""
    await container.selection_service.resume(auth, session_id)
    return {"success": True}
