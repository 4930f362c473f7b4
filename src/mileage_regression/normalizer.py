"""Feature statistics and zero-mean, unit-variance rescaling."""

from __future__ import annotations

import math
from collections.abc import Sequence

from mileage_regression.exceptions import DegenerateInputError
from mileage_regression.models import FeatureStats, NormalizedObservation, Observation


def compute_stats(values: Sequence[float]) -> FeatureStats:
    """Compute population mean, variance (divisor n) and standard deviation."""
    n = len(values)
    if n == 0:
        raise DegenerateInputError("Cannot compute statistics of an empty dataset.")
    if not all(math.isfinite(value) for value in values):
        raise DegenerateInputError("Cannot compute statistics of non-finite values.")
    mean = sum(values) / n
    variance = sum((value - mean) ** 2 for value in values) / n
    return FeatureStats(mean=mean, variance=variance, std=math.sqrt(variance))


def normalize(
    dataset: Sequence[Observation],
) -> tuple[list[NormalizedObservation], FeatureStats, FeatureStats]:
    """Rescale every observation with per-feature statistics of the whole dataset.

    Returns `(normalized_dataset, mileage_stats, price_stats)`. Raises
    `DegenerateInputError` for an empty dataset, a non-finite value or a constant
    column, since any of them would turn the normalized values into NaN/Inf.
    """
    if not dataset:
        raise DegenerateInputError("Dataset is empty; at least two distinct points are required.")

    mileages = [obs.mileage for obs in dataset]
    prices = [obs.price for obs in dataset]
    mileage_stats = _feature_stats("mileage", mileages)
    price_stats = _feature_stats("price", prices)

    normalized = [
        NormalizedObservation(
            mileage=scale(obs.mileage, mileage_stats),
            price=scale(obs.price, price_stats),
        )
        for obs in dataset
    ]
    return normalized, mileage_stats, price_stats


def scale(value: float, stats: FeatureStats) -> float:
    """Map a value into normalized space."""
    return (value - stats.mean) / stats.std


def rescale(value: float, stats: FeatureStats) -> float:
    """Map a normalized value back to original units."""
    return value * stats.std + stats.mean


def _feature_stats(feature: str, values: list[float]) -> FeatureStats:
    try:
        stats = compute_stats(values)
    except DegenerateInputError as exc:
        raise DegenerateInputError(f"Feature '{feature}': {exc}") from exc
    # Identical values can leave a tiny non-zero variance once the mean is rounded
    # (e.g. three times 0.1), so the raw values are compared too.
    if stats.std == 0.0 or min(values) == max(values):
        raise DegenerateInputError(
            f"Feature '{feature}' has zero variance (every value equals {values[0]}); "
            "it cannot be normalized."
        )
    return stats
