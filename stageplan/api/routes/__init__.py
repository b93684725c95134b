from fastapi import APIRouter

from stageplan.api.routes import admin, forecast, health, stages

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(forecast.router, tags=["forecast"])
api_router.include_router(stages.router, tags=["stages"])
api_router.include_router(admin.router, tags=["admin"])
