import math
from datetime import datetime
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from quakewatch.ml.severity import Severity


def _coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ReadingIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime | None = Field(default=None, alias="Timestamp")
    sensor1: float | None = Field(default=None, alias="Sensor1")
    sensor2: float | None = Field(default=None, alias="Sensor2")
    sensor3: float | None = Field(default=None, alias="Sensor3")
    sensor4: float | None = Field(default=None, alias="Sensor4")
    sensor5: float | None = Field(default=None, alias="Sensor5")
    magnitude: float | None = Field(default=None, alias="Magnitude")
    latitude: float | None = Field(default=None, alias="Latitude")
    longitude: float | None = Field(default=None, alias="Longitude")

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> datetime | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        stamp = pd.to_datetime(value, errors="coerce", utc=True)
        if pd.isna(stamp):
            return None
        return stamp.to_pydatetime()

    @field_validator(
        "sensor1", "sensor2", "sensor3", "sensor4", "sensor5", "magnitude", "latitude", "longitude",
        mode="before",
    )
    @classmethod
    def coerce_numeric(cls, value: Any) -> float | None:
        return _coerce_float(value)


class ScoredReadingOut(ReadingIn):
    anomaly_score: float = Field(alias="AnomalyScore")
    severity: Severity = Field(alias="Severity")
