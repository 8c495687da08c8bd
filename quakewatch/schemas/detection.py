from pydantic import BaseModel, Field

from quakewatch.ml.severity import Severity
from quakewatch.schemas.readings import ReadingIn, ScoredReadingOut


class DetectionRequest(BaseModel):
    readings: list[ReadingIn] = Field(default_factory=list)
    threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    n_trees: int | None = Field(default=None, ge=1, le=1000)
    seed: int | None = Field(default=None, ge=0)


class DetectionResult(BaseModel):
    threshold: float
    n_trees: int
    seed: int
    rows: int
    padded_rows: int
    cached: bool
    severity_counts: dict[str, int]
    readings: list[ScoredReadingOut]


class SeverityRequest(BaseModel):
    scores: list[float] = Field(default_factory=list)
    threshold: float = Field(ge=0.0, le=1.0)


class SeverityResult(BaseModel):
    threshold: float
    severities: list[Severity]
    severity_counts: dict[str, int]


class DetectionDefaults(BaseModel):
    threshold: float
    n_trees: int
    seed: int
    max_samples: int
    min_rows: int
