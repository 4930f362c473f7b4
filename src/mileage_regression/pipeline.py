"""Fit orchestration: normalize, train, denormalize."""

from __future__ import annotations

from collections.abc import Sequence

from mileage_regression.denormalizer import denormalize
from mileage_regression.models import FitReport, Observation
from mileage_regression.normalizer import normalize
from mileage_regression.optimizer import IterationCallback, train


def fit(
    dataset: Sequence[Observation],
    learning_rate: float,
    max_iterations: int,
    epsilon: float | None = None,
    on_iteration: IterationCallback | None = None,
) -> FitReport:
    """Train a model in original units.

    `DegenerateInputError` from normalization propagates before any iteration runs.
    """
    normalized, mileage_stats, price_stats = normalize(dataset)
    training = train(
        normalized,
        learning_rate=learning_rate,
        max_iterations=max_iterations,
        epsilon=epsilon,
        on_iteration=on_iteration,
    )
    parameters = denormalize(training.beta0, training.beta1, mileage_stats, price_stats)
    return FitReport(
        parameters=parameters,
        training=training,
        mileage_stats=mileage_stats,
        price_stats=price_stats,
    )
