from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from time import perf_counter

import numpy as np
import pandas as pd

from quakewatch.core.config import Settings, get_settings
from quakewatch.core.errors import InvalidParameterError
from quakewatch.ml.columns import SCORE_COLUMN, SEVERITY_COLUMN
from quakewatch.ml.dataset import ensure_min_rows, feature_frame
from quakewatch.ml.isolation.forest import IsolationForest
from quakewatch.ml.normalizer import normalize
from quakewatch.ml.severity import Severity, classify_scores

log = logging.getLogger(__name__)

CacheKey = tuple[str, int, int, int]


def dataset_fingerprint(features: pd.DataFrame) -> str:
    values = np.ascontiguousarray(features.to_numpy(dtype=np.float64))
    digest = hashlib.sha256()
    digest.update(str(values.shape).encode("utf-8"))
    digest.update(values.tobytes())
    return digest.hexdigest()


@dataclass(frozen=True, eq=False)
class ScoringRun:
    scores: np.ndarray
    sample_size: int
    fit_seconds: float


class ScoreCache:
    def __init__(self, maxsize: int = 16):
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[CacheKey, ScoringRun] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: CacheKey) -> ScoringRun | None:
        with self._lock:
            run = self._entries.get(key)
            if run is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return run

    def put(self, key: CacheKey, run: ScoringRun) -> None:
        if self.maxsize <= 0:
            return
        with self._lock:
            self._entries[key] = run
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


@dataclass(frozen=True, eq=False)
class ScoredBatch:
    frame: pd.DataFrame
    scores: np.ndarray
    n_trees: int
    seed: int
    sample_size: int
    padded_rows: int
    cached: bool
    fit_seconds: float = 0.0

    def severities(self, threshold: float) -> list[Severity]:
        return classify_scores(self.scores, threshold)

    def classify(self, threshold: float) -> pd.DataFrame:
        scored = self.frame.copy()
        scored[SCORE_COLUMN] = self.scores.copy()
        scored[SEVERITY_COLUMN] = [tier.value for tier in self.severities(threshold)]
        return scored


class AnomalyPipeline:
    def __init__(self, settings: Settings | None = None, cache: ScoreCache | None = None):
        self.settings = settings or get_settings()
        self.cache = cache if cache is not None else ScoreCache(self.settings.score_cache_size)

    def _fit_and_score(self, features: pd.DataFrame, n_trees: int, seed: int) -> ScoringRun:
        start = perf_counter()
        matrix = normalize(features)
        forest = IsolationForest(
            n_trees=n_trees,
            max_samples=self.settings.max_samples,
            n_jobs=self.settings.n_jobs,
        )
        model = forest.fit(matrix, random_state=seed)
        scores = model.score(matrix)
        duration = perf_counter() - start

        scores.setflags(write=False)
        log.info(
            "Fitted %d isolation trees on %d rows (sample size %d) in %.3fs",
            n_trees,
            len(matrix),
            model.sample_size,
            duration,
        )
        return ScoringRun(scores=scores, sample_size=model.sample_size, fit_seconds=duration)

    def score(self, frame: pd.DataFrame, n_trees: int | None = None, seed: int | None = None) -> ScoredBatch:
        n_trees = self.settings.n_trees if n_trees is None else n_trees
        seed = self.settings.random_seed if seed is None else seed
        if n_trees < 1:
            raise InvalidParameterError("n_trees", n_trees, "must be at least 1")
        if seed < 0:
            raise InvalidParameterError("seed", seed, "must be non-negative")

        padded, padded_rows = ensure_min_rows(
            frame,
            min_rows=self.settings.min_rows,
            seed=seed,
            pad=self.settings.pad_small_batches,
        )
        features = feature_frame(padded)
        key = (dataset_fingerprint(features), n_trees, seed, self.settings.max_samples)

        run = self.cache.get(key)
        cached = run is not None
        if run is None:
            run = self._fit_and_score(features, n_trees, seed)
            self.cache.put(key, run)
        else:
            log.debug("Reusing cached scores for %d rows", len(padded))

        return ScoredBatch(
            frame=padded,
            scores=run.scores,
            n_trees=n_trees,
            seed=seed,
            sample_size=run.sample_size,
            padded_rows=padded_rows,
            cached=cached,
            fit_seconds=0.0 if cached else run.fit_seconds,
        )

    def detect(
        self,
        frame: pd.DataFrame,
        threshold: float | None = None,
        n_trees: int | None = None,
        seed: int | None = None,
    ) -> pd.DataFrame:
        threshold = self.settings.default_threshold if threshold is None else threshold
        return self.score(frame, n_trees=n_trees, seed=seed).classify(threshold)
