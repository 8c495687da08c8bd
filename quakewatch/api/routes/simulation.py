from fastapi import APIRouter, Query

from quakewatch.ml.simulation import simulate_readings
from quakewatch.schemas.readings import ReadingIn
from quakewatch.services.detection_service import frame_to_records

router = APIRouter(prefix="/simulation", tags=["simulation"])


@router.get("/readings", response_model=list[ReadingIn])
def simulated_readings(
    rows: int = Query(default=50, ge=0, le=5000),
    seed: int = Query(default=42, ge=0),
    spike: list[int] = Query(default=[]),
):
    frame = simulate_readings(rows, seed=seed, spike_rows=spike)
    return frame_to_records(frame)
