"""Scatter plot of the dataset with the fitted line."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

from matplotlib import pyplot as plt  # noqa: E402

from mileage_regression.exceptions import DegenerateInputError  # noqa: E402
from mileage_regression.models import ModelParameters, Observation  # noqa: E402
from mileage_regression.predictor import predict_with  # noqa: E402

_FIGSIZE_IN = (6.4, 4.8)
_DPI = 100


def render_plot(
    dataset: Sequence[Observation],
    params: ModelParameters,
    output_path: Path,
    data_only: bool = False,
) -> Path:
    """Write a 640x480 PNG with observations and, unless `data_only`, the fitted line."""
    if not dataset:
        raise DegenerateInputError("Cannot plot an empty dataset.")

    mileages = [obs.mileage for obs in dataset]
    prices = [obs.price for obs in dataset]
    min_mileage = min(mileages)
    max_mileage = max(mileages)

    fig, ax = plt.subplots(figsize=_FIGSIZE_IN, dpi=_DPI)
    try:
        ax.scatter(mileages, prices, marker="x", color="red", label="observations")
        if not data_only:
            ax.plot(
                [min_mileage, max_mileage],
                [predict_with(params, min_mileage), predict_with(params, max_mileage)],
                color="green",
                label=f"price = {params.theta0:.2f} + {params.theta1:.6f} * mileage",
            )
        ax.set(xlabel="mileage", ylabel="price", title="Mileage-price linear regression")
        ax.grid()
        ax.legend()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path)
    finally:
        plt.close(fig)
    return output_path
