import numpy as np
import pandas as pd

from quakewatch.ml.columns import SENSOR_COLUMNS
from quakewatch.ml.normalizer import normalize
from quakewatch.ml.simulation import simulate_readings


def test_columns_are_standardized():
    frame = simulate_readings(40, seed=3)
    matrix = normalize(frame)

    assert matrix.shape == (40, len(SENSOR_COLUMNS))
    np.testing.assert_allclose(matrix.mean(axis=0), 0.0, atol=1e-9)
    np.testing.assert_allclose(matrix.std(axis=0, ddof=1), 1.0, atol=1e-9)


def test_constant_column_becomes_zeros():
    frame = simulate_readings(25, seed=3)
    frame["Sensor2"] = 0.1
    matrix = normalize(frame)

    assert np.all(matrix[:, 1] == 0.0)
    assert np.all(np.isfinite(matrix))
    np.testing.assert_allclose(matrix[:, 0].std(ddof=1), 1.0, atol=1e-9)


def test_malformed_and_missing_cells_are_neutralized():
    frame = pd.DataFrame(
        {
            "Sensor1": [0.4, "bad", 0.6, 0.5],
            "Sensor2": [1.0, 2.0, None, 3.0],
            "Sensor3": [0.5, 0.5, 0.5, 0.5],
            "Sensor4": [np.inf, 1.0, 2.0, 3.0],
        }
    )
    matrix = normalize(frame)

    assert matrix.shape == (4, 5)
    assert np.all(np.isfinite(matrix))
    assert matrix[1, 0] == 0.0
    assert matrix[2, 1] == 0.0
    assert np.all(matrix[:, 2] == 0.0)
    assert matrix[0, 3] == 0.0
    # Sensor5 is absent altogether.
    assert np.all(matrix[:, 4] == 0.0)


def test_uses_sample_standard_deviation():
    frame = pd.DataFrame({column: [1.0, 3.0] for column in SENSOR_COLUMNS})
    matrix = normalize(frame)

    # mean 2, sample std sqrt(2)
    np.testing.assert_allclose(matrix[:, 0], [-1 / np.sqrt(2), 1 / np.sqrt(2)])
