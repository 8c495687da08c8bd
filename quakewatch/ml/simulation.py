from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import numpy as np
import pandas as pd

from quakewatch.ml.columns import READING_COLUMNS, SENSOR_COLUMNS

BASELINE_LEVEL = 0.5
BASELINE_SPREAD = 0.05
SENSOR_RANGE = (0.0, 4.0)
SPIKE_LEVEL = 3.5
SPIKE_CHANNELS = ("Sensor3", "Sensor4")

# Roughly the California fault system.
LATITUDE_RANGE = (32.5, 42.0)
LONGITUDE_RANGE = (-124.5, -114.0)


def simulate_readings(
    rows: int,
    seed: int | np.random.Generator = 42,
    spike_rows: Iterable[int] = (),
    start: datetime | None = None,
    interval_seconds: float = 1.0,
) -> pd.DataFrame:
    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
    rows = max(int(rows), 0)
    if start is None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

    sensors = rng.normal(loc=BASELINE_LEVEL, scale=BASELINE_SPREAD, size=(rows, len(SENSOR_COLUMNS)))
    sensors = sensors.clip(*SENSOR_RANGE)
    magnitude = rng.uniform(0.5, 2.5, size=rows)
    latitude = rng.uniform(*LATITUDE_RANGE, size=rows)
    longitude = rng.uniform(*LONGITUDE_RANGE, size=rows)

    frame = pd.DataFrame(sensors, columns=list(SENSOR_COLUMNS))
    frame.insert(
        0,
        "Timestamp",
        pd.to_datetime([start + timedelta(seconds=i * interval_seconds) for i in range(rows)], utc=True),
    )
    frame["Magnitude"] = magnitude
    frame["Latitude"] = latitude
    frame["Longitude"] = longitude

    spikes = sorted({int(i) for i in spike_rows if 0 <= int(i) < rows})
    if spikes:
        frame.loc[spikes, list(SPIKE_CHANNELS)] = SPIKE_LEVEL
        frame.loc[spikes, "Magnitude"] = rng.uniform(5.0, 7.0, size=len(spikes))

    return frame[list(READING_COLUMNS)]
