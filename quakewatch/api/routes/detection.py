from fastapi import APIRouter

from quakewatch.schemas.detection import (
    DetectionDefaults,
    DetectionRequest,
    DetectionResult,
    SeverityRequest,
    SeverityResult,
)
from quakewatch.services.detection_service import DetectionService

router = APIRouter(prefix="/detection", tags=["detection"])


@router.get("/defaults", response_model=DetectionDefaults)
def defaults():
    return DetectionService().defaults()


@router.post("/score", response_model=DetectionResult)
def score_readings(payload: DetectionRequest):
    return DetectionService().detect(payload)


@router.post("/severity", response_model=SeverityResult)
def reclassify(payload: SeverityRequest):
    return DetectionService().reclassify(payload)
