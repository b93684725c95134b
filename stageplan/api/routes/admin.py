"""Admin API routes — forecast maintenance."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stageplan.db.base import get_db_session
from stageplan.schemas.forecast import BackfillResponse
from stageplan.services.forecast_backfill import ForecastBackfillService

router = APIRouter(prefix="/admin", tags=["admin"])


def get_backfill_service(session: AsyncSession = Depends(get_db_session)) -> ForecastBackfillService:
    return ForecastBackfillService(session)


@router.post("/forecast/backfill", response_model=BackfillResponse)
async def backfill_forecasts(service: ForecastBackfillService = Depends(get_backfill_service)) -> BackfillResponse:
    """Seed forecast dates from planned dates on stages that have no forecast yet."""
    updated = await service.backfill()
    return BackfillResponse(updated=updated)
