from fastapi import APIRouter

from quakewatch.api.routes.detection import router as detection_router
from quakewatch.api.routes.simulation import router as simulation_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(detection_router)
api_router.include_router(simulation_router)
