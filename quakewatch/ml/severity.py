import enum
from collections.abc import Sequence

import numpy as np

HIGH_MARGIN = 0.1


class Severity(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {Severity.low: 0, Severity.medium: 1, Severity.high: 2}


def classify(score: float, threshold: float) -> Severity:
    if score > threshold + HIGH_MARGIN:
        return Severity.high
    if score > threshold:
        return Severity.medium
    return Severity.low


def classify_scores(scores: Sequence[float] | np.ndarray, threshold: float) -> list[Severity]:
    values = np.asarray(scores, dtype=np.float64)
    tiers = np.where(
        values > threshold + HIGH_MARGIN,
        Severity.high.value,
        np.where(values > threshold, Severity.medium.value, Severity.low.value),
    )
    return [Severity(tier) for tier in tiers.tolist()]


def severity_counts(severities: Sequence[Severity]) -> dict[str, int]:
    counts = {tier.value: 0 for tier in Severity}
    for tier in severities:
        counts[Severity(tier).value] += 1
    return counts
