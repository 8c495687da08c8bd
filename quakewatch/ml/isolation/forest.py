from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from joblib import Parallel, delayed

from quakewatch.core.errors import InsufficientDataError
from quakewatch.ml.isolation.tree import IsolationTree, average_path_length

MIN_SAMPLE_SIZE = 2


def _grow_tree(
    matrix: np.ndarray,
    sample_size: int,
    max_depth: int,
    rng: np.random.Generator,
) -> IsolationTree:
    rows = rng.choice(len(matrix), size=sample_size, replace=len(matrix) < sample_size)
    return IsolationTree.grow(matrix[rows], max_depth=max_depth, rng=rng)


@dataclass(frozen=True)
class IsolationForestModel:
    trees: tuple[IsolationTree, ...]
    sample_size: int

    @property
    def max_depth(self) -> int:
        return math.ceil(math.log2(self.sample_size))

    def path_lengths(self, matrix: np.ndarray) -> np.ndarray:
        matrix = np.asarray(matrix, dtype=np.float64)
        if not self.trees or len(matrix) == 0:
            return np.zeros(len(matrix), dtype=np.float64)
        total = np.zeros(len(matrix), dtype=np.float64)
        for tree in self.trees:
            total += tree.path_lengths(matrix)
        return total / len(self.trees)

    def score(self, matrix: np.ndarray) -> np.ndarray:
        mean_path = self.path_lengths(matrix)
        return np.power(2.0, -mean_path / average_path_length(self.sample_size))


@dataclass
class IsolationForest:
    n_trees: int = 100
    max_samples: int = 256
    n_jobs: int = 1

    def sample_size(self, n_rows: int) -> int:
        return max(min(self.max_samples, n_rows), MIN_SAMPLE_SIZE)

    def fit(self, matrix: np.ndarray, random_state: int | np.random.Generator = 42) -> IsolationForestModel:
        matrix = np.asarray(matrix, dtype=np.float64)
        if len(matrix) == 0:
            raise InsufficientDataError(rows=0, min_rows=1)

        rng = random_state if isinstance(random_state, np.random.Generator) else np.random.default_rng(random_state)
        sample_size = self.sample_size(len(matrix))
        max_depth = math.ceil(math.log2(sample_size))

        # One child stream per tree keeps trees independent of build order.
        streams = rng.spawn(self.n_trees)
        trees = Parallel(n_jobs=self.n_jobs)(
            delayed(_grow_tree)(matrix, sample_size, max_depth, stream) for stream in streams
        )
        return IsolationForestModel(trees=tuple(trees), sample_size=sample_size)


def fit(
    matrix: np.ndarray,
    ntrees: int = 100,
    seed: int | np.random.Generator = 42,
    max_samples: int = 256,
    n_jobs: int = 1,
) -> IsolationForestModel:
    return IsolationForest(n_trees=ntrees, max_samples=max_samples, n_jobs=n_jobs).fit(matrix, random_state=seed)


def score(model: IsolationForestModel, matrix: np.ndarray) -> np.ndarray:
    return model.score(matrix)
