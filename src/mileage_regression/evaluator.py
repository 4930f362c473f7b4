"""Goodness-of-fit of persisted parameters."""

from __future__ import annotations

import math
from collections.abc import Sequence

from mileage_regression.exceptions import DegenerateInputError
from mileage_regression.models import FitBand, FitQuality, ModelParameters, Observation
from mileage_regression.predictor import predict_with

_BANDS: list[tuple[float, FitBand]] = [
    (0.20, FitBand.VERY_BAD),
    (0.40, FitBand.BAD),
    (0.60, FitBand.MODERATE),
    (0.75, FitBand.GOOD),
    (0.90, FitBand.VERY_GOOD),
]


def r_squared(dataset: Sequence[Observation], params: ModelParameters) -> float:
    """Coefficient of determination `1 - SS_res / SS_tot`."""
    if not dataset:
        raise DegenerateInputError("Cannot evaluate a model on an empty dataset.")
    price_mean = sum(obs.price for obs in dataset) / len(dataset)
    ss_res = sum((obs.price - predict_with(params, obs.mileage)) ** 2 for obs in dataset)
    ss_tot = sum((obs.price - price_mean) ** 2 for obs in dataset)
    if ss_tot == 0.0:
        raise DegenerateInputError("Price column is constant; R² is undefined.")
    return 1.0 - ss_res / ss_tot


def describe_fit(value: float) -> FitBand:
    """Map an R² value to a qualitative band."""
    if math.isnan(value) or value < 0.0:
        return FitBand.WORSE_THAN_MEAN
    for upper, band in _BANDS:
        if value < upper:
            return band
    return FitBand.EXCELLENT


def evaluate(dataset: Sequence[Observation], params: ModelParameters) -> FitQuality:
    """Score a model on a dataset and attach its qualitative band."""
    value = r_squared(dataset, params)
    return FitQuality(r_squared=value, band=describe_fit(value))
