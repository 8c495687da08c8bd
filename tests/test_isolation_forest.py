import math

import numpy as np
import pytest
from joblib import parallel_config

from quakewatch.core.errors import InsufficientDataError
from quakewatch.ml.isolation.forest import IsolationForest, fit, score
from quakewatch.ml.isolation.tree import IsolationLeaf, IsolationTree, average_path_length


@pytest.fixture()
def matrix() -> np.ndarray:
    return np.random.default_rng(11).normal(size=(120, 5))


def test_average_path_length_constants():
    assert average_path_length(0) == 0.0
    assert average_path_length(1) == 0.0
    assert average_path_length(2) == 1.0
    expected = 2.0 * (math.log(255) + 0.5772156649) - 2.0 * 255 / 256
    assert average_path_length(256) == pytest.approx(expected)


def test_fit_and_score_are_deterministic(matrix):
    first = score(fit(matrix, ntrees=50, seed=42), matrix)
    second = score(fit(matrix, ntrees=50, seed=42), matrix)
    np.testing.assert_array_equal(first, second)


def test_seed_changes_scores(matrix):
    first = score(fit(matrix, ntrees=50, seed=1), matrix)
    second = score(fit(matrix, ntrees=50, seed=2), matrix)
    assert not np.array_equal(first, second)


def test_generator_can_be_injected(matrix):
    from_seed = fit(matrix, ntrees=20, seed=5).score(matrix)
    from_generator = fit(matrix, ntrees=20, seed=np.random.default_rng(5)).score(matrix)
    np.testing.assert_array_equal(from_seed, from_generator)


def test_one_score_per_row_in_row_order(matrix):
    model = fit(matrix, ntrees=30, seed=42)
    scores = model.score(matrix)
    assert scores.shape == (len(matrix),)
    for i in (0, 17, 119):
        assert model.score(matrix[i : i + 1])[0] == scores[i]


def test_permuting_rows_permutes_scores(matrix):
    perm = np.random.default_rng(3).permutation(len(matrix))
    scores = fit(matrix, ntrees=40, seed=42).score(matrix)
    permuted = fit(matrix[perm], ntrees=40, seed=42).score(matrix[perm])
    np.testing.assert_array_equal(permuted, scores[perm])


def test_sample_size_and_depth_limits():
    big = np.random.default_rng(0).normal(size=(600, 5))
    model = fit(big, ntrees=10, seed=42)
    assert model.sample_size == 256
    assert model.max_depth == 8
    assert all(tree.depth <= 8 for tree in model.trees)

    small = fit(big[:40], ntrees=10, seed=42)
    assert small.sample_size == 40
    assert small.max_depth == 6


def test_outlier_scores_highest():
    rng = np.random.default_rng(4)
    data = rng.normal(scale=0.1, size=(100, 5))
    data[57] = [6.0, -6.0, 6.0, -6.0, 6.0]
    scores = fit(data, ntrees=100, seed=42).score(data)
    assert int(np.argmax(scores)) == 57
    assert scores[57] > 0.7
    assert np.median(scores) < 0.6


def test_single_row_falls_back_to_minimum_sample():
    model = fit(np.array([[0.1, 0.2, 0.3, 0.4, 0.5]]), ntrees=5, seed=42)
    assert model.sample_size == 2
    scores = model.score(np.array([[0.1, 0.2, 0.3, 0.4, 0.5]]))
    assert scores.shape == (1,)
    assert np.isfinite(scores).all()


def test_constant_matrix_grows_single_leaf_trees():
    model = fit(np.zeros((10, 5)), ntrees=5, seed=42)
    assert all(isinstance(tree.root, IsolationLeaf) for tree in model.trees)
    scores = model.score(np.zeros((10, 5)))
    np.testing.assert_allclose(scores, 0.5)


def test_empty_matrix_is_rejected():
    with pytest.raises(InsufficientDataError):
        fit(np.empty((0, 5)))


def test_threaded_build_matches_sequential(matrix):
    sequential = IsolationForest(n_trees=16, n_jobs=1).fit(matrix, random_state=9).score(matrix)
    with parallel_config(backend="threading"):
        threaded = IsolationForest(n_trees=16, n_jobs=4).fit(matrix, random_state=9).score(matrix)
    np.testing.assert_array_equal(sequential, threaded)


def test_tree_routes_rows_to_leaves():
    sample = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [10.0, 10.0]])
    tree = IsolationTree.grow(sample, max_depth=2, rng=np.random.default_rng(0))
    lengths = tree.path_lengths(sample)
    assert lengths.shape == (4,)
    assert np.all(lengths >= 1.0)
    assert np.all(lengths <= 2.0 + average_path_length(4))
