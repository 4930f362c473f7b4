"""Price estimation from fitted parameters."""

from __future__ import annotations

from mileage_regression.models import ModelParameters


def predict(theta0: float, theta1: float, mileage: float) -> float:
    """Estimate a price. Mileages outside the training range are extrapolated."""
    return theta0 + theta1 * mileage


def predict_with(params: ModelParameters, mileage: float) -> float:
    """Predict a price with the parameters of a loaded model."""
    return predict(params.theta0, params.theta1, mileage)
