"""Map normalized-space parameters back to original units."""

from __future__ import annotations

from mileage_regression.models import FeatureStats, ModelParameters


def denormalize(
    beta0: float,
    beta1: float,
    mileage_stats: FeatureStats,
    price_stats: FeatureStats,
) -> ModelParameters:
    """Recover `(theta0, theta1)` such that `price = theta0 + theta1 * mileage`.

    Substituting `x = (mileage - m.mean) / m.std` into the normalized model and
    undoing `y = (price - p.mean) / p.std` gives:

        theta1 = beta1 * p.std / m.std
        theta0 = beta0 * p.std + p.mean - theta1 * m.mean
    """
    theta1 = beta1 * price_stats.std / mileage_stats.std
    theta0 = beta0 * price_stats.std + price_stats.mean - theta1 * mileage_stats.mean
    return ModelParameters(theta0=theta0, theta1=theta1)
