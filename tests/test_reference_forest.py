import numpy as np
from sklearn.ensemble import IsolationForest as SklearnIsolationForest

from quakewatch.ml.isolation.forest import fit


def test_agrees_with_sklearn_on_ranking():
    rng = np.random.default_rng(21)
    data = rng.normal(scale=0.3, size=(200, 5))
    outliers = [13, 77, 150]
    data[outliers] += np.array([4.0, -4.0, 4.0, 0.0, 0.0])

    ours = fit(data, ntrees=200, seed=42).score(data)
    reference = -SklearnIsolationForest(n_estimators=200, random_state=42).fit(data).score_samples(data)

    assert set(np.argsort(ours)[-3:]) == set(outliers)
    assert set(np.argsort(reference)[-3:]) == set(outliers)
    rank_ours = np.argsort(np.argsort(ours))
    rank_reference = np.argsort(np.argsort(reference))
    assert np.corrcoef(rank_ours, rank_reference)[0, 1] > 0.7
