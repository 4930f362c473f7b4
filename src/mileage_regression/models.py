"""Core typed models."""

from __future__ import annotations

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FitBand(StrEnum):
    """Qualitative goodness-of-fit bands for an R² value."""

    WORSE_THAN_MEAN = "worse than the mean"
    VERY_BAD = "very bad"
    BAD = "bad"
    MODERATE = "moderate"
    GOOD = "good"
    VERY_GOOD = "very good"
    EXCELLENT = "excellent"


class Observation(BaseModel):
    """One (mileage, price) data point."""

    model_config = ConfigDict(frozen=True)

    mileage: float
    price: float


class NormalizedObservation(BaseModel):
    """Observation rescaled to zero mean and unit standard deviation per feature."""

    model_config = ConfigDict(frozen=True)

    mileage: float
    price: float


class FeatureStats(BaseModel):
    """Population statistics of a single feature."""

    model_config = ConfigDict(frozen=True)

    mean: float
    variance: float = Field(ge=0.0)
    std: float = Field(ge=0.0)

    @model_validator(mode="after")
    def ensure_std_matches_variance(self) -> FeatureStats:
        """Keep std and variance consistent."""
        if not math.isclose(self.std, math.sqrt(self.variance), rel_tol=1e-12, abs_tol=1e-300):
            raise ValueError(f"std {self.std} is not sqrt(variance {self.variance}).")
        return self


class ModelParameters(BaseModel):
    """Intercept and slope in original (mileage, price) units."""

    model_config = ConfigDict(frozen=True)

    theta0: float = 0.0
    theta1: float = 0.0


class TrainingResult(BaseModel):
    """Final state reported by the gradient descent engine."""

    model_config = ConfigDict(frozen=True)

    beta0: float
    beta1: float
    iterations_run: int
    final_cost: float
    cost_history: list[float] = Field(default_factory=list)
    converged: bool = False

    def as_tuple(self) -> tuple[float, float, int, float]:
        """Return `(beta0, beta1, iterations_run, final_cost)`."""
        return self.beta0, self.beta1, self.iterations_run, self.final_cost


class FitReport(BaseModel):
    """Outcome of a full normalize -> train -> denormalize run."""

    model_config = ConfigDict(frozen=True)

    parameters: ModelParameters
    training: TrainingResult
    mileage_stats: FeatureStats
    price_stats: FeatureStats


class FitQuality(BaseModel):
    """Goodness-of-fit of persisted parameters against a dataset."""

    r_squared: float
    band: FitBand


class AppConfig(BaseModel):
    """Runtime configuration."""

    data_file: str = "data.csv"
    weights_file: str = "weights"
    plot_file: str = "plot.png"
    learning_rate: float = Field(default=0.1, gt=0.0)
    max_iterations: int = Field(default=1000, ge=0)
    epsilon: float | None = Field(default=None, gt=0.0)
    trace_every: int = Field(default=100, ge=1)
    output_root: str = "outputs"
