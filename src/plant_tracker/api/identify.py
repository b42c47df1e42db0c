"""Identification engine endpoints."""

from fastapi import APIRouter, Depends

from plant_tracker.api.dependencies import get_container, require_user
from plant_tracker.api.schemas import (
    ContinueIdentificationRequest,
    IdentifyPlantRequest,
)
from plant_tracker.containers import AppContainer
from plant_tracker.domain.auth import AuthContext
from plant_tracker.domain.import_sessions import STATUS_COMPLETE

router = APIRouter(prefix="/api/identify-plant", tags=["identify"])


@router.post("")
async def identify_plant(
    body: IdentifyPlantRequest,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Run the initial identification for a pending session."""
    session = await container.identification_workflow.identify(
        auth, body.session_id, body.image_url
    )
    return session.to_dict()


@router.post("/continue")
async def continue_identification(
    body: ContinueIdentificationRequest,
    auth: AuthContext = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Research care requirements for the committed species."""
    session = await container.identification_workflow.continue_research(
        auth, body.session_id, body.species, body.scientific_name
    )
    return {
        "success": session.status == STATUS_COMPLETE,
        "status": session.status,
        "careRequirements": session.care_requirements,
    }
