import numpy as np
import pandas as pd

from quakewatch.ml.columns import READING_COLUMNS, SCORE_COLUMN, SEVERITY_COLUMN
from quakewatch.ml.pipeline import AnomalyPipeline
from quakewatch.ml.severity import classify_scores, severity_counts
from quakewatch.observability.metrics import (
    DETECTION_RUNS_TOTAL,
    ENSEMBLE_FIT_SECONDS,
    PADDED_ROWS_TOTAL,
    READINGS_SCORED_TOTAL,
    SEVERITY_ASSIGNED_TOTAL,
)
from quakewatch.schemas.detection import DetectionDefaults, DetectionRequest, SeverityRequest
from quakewatch.schemas.readings import ReadingIn
from quakewatch.services.state import get_pipeline


def readings_to_frame(readings: list[ReadingIn]) -> pd.DataFrame:
    records = [reading.model_dump(by_alias=True) for reading in readings]
    frame = pd.DataFrame.from_records(records, columns=list(READING_COLUMNS))
    frame["Timestamp"] = pd.to_datetime(frame["Timestamp"], utc=True)
    return frame


def frame_to_records(frame: pd.DataFrame) -> list[dict]:
    plain = frame.astype(object).where(frame.notna(), None)
    return plain.to_dict(orient="records")


def _record_severities(counts: dict[str, int]) -> None:
    for tier, count in counts.items():
        if count:
            SEVERITY_ASSIGNED_TOTAL.labels(severity=tier).inc(count)


class DetectionService:
    def __init__(self, pipeline: AnomalyPipeline | None = None):
        self.pipeline = pipeline or get_pipeline()
        self.settings = self.pipeline.settings

    def defaults(self) -> DetectionDefaults:
        return DetectionDefaults(
            threshold=self.settings.default_threshold,
            n_trees=self.settings.n_trees,
            seed=self.settings.random_seed,
            max_samples=self.settings.max_samples,
            min_rows=self.settings.min_rows,
        )

    def detect(self, payload: DetectionRequest) -> dict:
        threshold = self.settings.default_threshold if payload.threshold is None else payload.threshold
        frame = readings_to_frame(payload.readings)

        batch = self.pipeline.score(frame, n_trees=payload.n_trees, seed=payload.seed)
        scored = batch.classify(threshold)
        counts = severity_counts(scored[SEVERITY_COLUMN].tolist())

        DETECTION_RUNS_TOTAL.labels(cache="hit" if batch.cached else "miss").inc()
        if not batch.cached:
            ENSEMBLE_FIT_SECONDS.observe(batch.fit_seconds)
        READINGS_SCORED_TOTAL.inc(len(scored))
        if batch.padded_rows:
            PADDED_ROWS_TOTAL.inc(batch.padded_rows)
        _record_severities(counts)

        return {
            "threshold": threshold,
            "n_trees": batch.n_trees,
            "seed": batch.seed,
            "rows": len(scored),
            "padded_rows": batch.padded_rows,
            "cached": batch.cached,
            "severity_counts": counts,
            "readings": frame_to_records(scored[[*READING_COLUMNS, SCORE_COLUMN, SEVERITY_COLUMN]]),
        }

    def reclassify(self, payload: SeverityRequest) -> dict:
        scores = np.asarray(payload.scores, dtype=np.float64)
        severities = classify_scores(scores, payload.threshold)
        counts = severity_counts(severities)
        _record_severities(counts)
        return {
            "threshold": payload.threshold,
            "severities": severities,
            "severity_counts": counts,
        }
