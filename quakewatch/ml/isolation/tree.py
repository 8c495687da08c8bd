"""
Isolation trees built by random axis-parallel partitioning.

A tree is grown on a small subsample of the normalized matrix. Every internal
node picks one feature and a split value uniformly inside the feature's range
at that node; rows with ``value < split`` go left. Growth stops at a single
row, at ``max_depth`` or when every feature is constant inside the node, so
leaves may hold several rows. Their unresolved depth is accounted for with
:func:`average_path_length`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

EULER_GAMMA = 0.5772156649


def average_path_length(n: int) -> float:
    """Expected path length of an unsuccessful BST search among ``n`` points."""
    if n <= 1:
        return 0.0
    if n == 2:
        return 1.0
    harmonic = math.log(n - 1) + EULER_GAMMA
    return 2.0 * harmonic - 2.0 * (n - 1) / n


@dataclass(frozen=True)
class IsolationLeaf:
    size: int


@dataclass(frozen=True)
class IsolationNode:
    feature: int
    split: float
    left: IsolationNode | IsolationLeaf
    right: IsolationNode | IsolationLeaf


@dataclass(frozen=True)
class IsolationTree:
    root: IsolationNode | IsolationLeaf
    max_depth: int

    @classmethod
    def grow(cls, sample: np.ndarray, max_depth: int, rng: np.random.Generator) -> IsolationTree:
        return cls(root=_grow(sample, 0, max_depth, rng), max_depth=max_depth)

    def path_lengths(self, matrix: np.ndarray) -> np.ndarray:
        """Path length of every row of ``matrix``, in row order."""
        out = np.empty(len(matrix), dtype=np.float64)
        _route(self.root, matrix, np.arange(len(matrix)), 0, out)
        return out

    @property
    def depth(self) -> int:
        return _depth(self.root)


def _grow(
    sample: np.ndarray,
    depth: int,
    max_depth: int,
    rng: np.random.Generator,
) -> IsolationNode | IsolationLeaf:
    if len(sample) <= 1 or depth >= max_depth:
        return IsolationLeaf(size=len(sample))

    lows = sample.min(axis=0)
    highs = sample.max(axis=0)
    candidates = np.flatnonzero(highs > lows)
    if candidates.size == 0:
        return IsolationLeaf(size=len(sample))

    feature = int(rng.choice(candidates))
    split = float(rng.uniform(lows[feature], highs[feature]))
    goes_left = sample[:, feature] < split
    return IsolationNode(
        feature=feature,
        split=split,
        left=_grow(sample[goes_left], depth + 1, max_depth, rng),
        right=_grow(sample[~goes_left], depth + 1, max_depth, rng),
    )


def _route(
    node: IsolationNode | IsolationLeaf,
    matrix: np.ndarray,
    rows: np.ndarray,
    depth: int,
    out: np.ndarray,
) -> None:
    if rows.size == 0:
        return
    if isinstance(node, IsolationLeaf):
        out[rows] = depth + average_path_length(node.size)
        return
    goes_left = matrix[rows, node.feature] < node.split
    _route(node.left, matrix, rows[goes_left], depth + 1, out)
    _route(node.right, matrix, rows[~goes_left], depth + 1, out)


def _depth(node: IsolationNode | IsolationLeaf) -> int:
    if isinstance(node, IsolationLeaf):
        return 0
    return 1 + max(_depth(node.left), _depth(node.right))
