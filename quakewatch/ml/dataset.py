import logging
from datetime import timedelta

import numpy as np
import pandas as pd

from quakewatch.core.errors import InsufficientDataError
from quakewatch.ml.columns import SENSOR_COLUMNS
from quakewatch.ml.simulation import simulate_readings

log = logging.getLogger(__name__)

EPOCH = pd.Timestamp("1970-01-01", tz="UTC")


def feature_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Sensor columns as float; missing columns and unusable cells become NaN."""
    features = frame.reindex(columns=list(SENSOR_COLUMNS))
    features = features.apply(pd.to_numeric, errors="coerce").astype(np.float64)
    return features.replace([np.inf, -np.inf], np.nan)


def _filler_start(frame: pd.DataFrame) -> pd.Timestamp:
    if "Timestamp" not in frame.columns or frame.empty:
        return EPOCH
    stamps = pd.to_datetime(frame["Timestamp"], errors="coerce", utc=True).dropna()
    if stamps.empty:
        return EPOCH
    return stamps.max() + timedelta(seconds=1)


def ensure_min_rows(
    frame: pd.DataFrame,
    min_rows: int = 2,
    seed: int = 42,
    pad: bool = True,
) -> tuple[pd.DataFrame, int]:
    missing = min_rows - len(frame)
    if missing <= 0:
        return frame, 0
    if not pad:
        raise InsufficientDataError(rows=len(frame), min_rows=min_rows)

    filler = simulate_readings(missing, seed=seed, start=_filler_start(frame).to_pydatetime())
    if frame.empty:
        columns = list(dict.fromkeys([*frame.columns, *filler.columns]))
        padded = filler.reindex(columns=columns)
    else:
        padded = pd.concat([frame, filler], ignore_index=True)
    log.info("Padded dataset from %d to %d rows with synthetic readings", len(frame), len(padded))
    return padded, missing
