"""Stage validation endpoint.

POST /api/projects/{project_id}/stages/{stage_code}/validate - Check a requested status change
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.db.base import get_db_session
from stageplan.schemas.forecast import StageValidationRequest, StageValidationResponse
from stageplan.services.stage_validation_service import StageValidationService

router = APIRouter()


def get_stage_validation_service(session: AsyncSession = Depends(get_db_session)) -> StageValidationService:
    return StageValidationService(session)


@router.post("/projects/{project_id}/stages/{stage_code}/validate", response_model=StageValidationResponse)
async def validate_stage(
    project_id: uuid.UUID,
    stage_code: str,
    body: StageValidationRequest,
    service: StageValidationService = Depends(get_stage_validation_service),
) -> StageValidationResponse:
    """Validate a stage status change; always 200, validity is in the body."""
    result = await service.validate(
        project_id,
        stage_code=stage_code,
        target_status=body.target_status,
        target_date=body.target_date,
        is_hod=body.is_hod,
    )
    return StageValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
        missing_predecessors=result.missing_predecessors,
        suggested_auto_start=result.suggested_auto_start,
    )
