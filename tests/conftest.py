import os

import numpy as np
import pandas as pd
import pytest
from fastapi.testclient import TestClient

os.environ["DEFAULT_THRESHOLD"] = "0.85"
os.environ["N_TREES"] = "100"
os.environ["RANDOM_SEED"] = "42"
os.environ["PAD_SMALL_BATCHES"] = "true"
os.environ["METRICS_ENABLED"] = "true"
os.environ["OTEL_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from quakewatch.main import app  # noqa: E402
from quakewatch.ml.columns import SENSOR_COLUMNS  # noqa: E402
from quakewatch.ml.simulation import simulate_readings  # noqa: E402
from quakewatch.services.state import get_pipeline  # noqa: E402

SPIKE_ROW = 39


@pytest.fixture(autouse=True)
def clear_score_cache():
    get_pipeline().cache.clear()
    yield
    get_pipeline().cache.clear()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def spike_dataset() -> pd.DataFrame:
    rng = np.random.default_rng(7)
    frame = simulate_readings(50, seed=7)
    frame[list(SENSOR_COLUMNS)] = rng.normal(loc=0.5, scale=0.02, size=(50, len(SENSOR_COLUMNS)))
    frame.loc[SPIKE_ROW, ["Sensor3", "Sensor4"]] = 3.5
    return frame
