"""Batch gradient descent over a normalized dataset."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from mileage_regression.exceptions import DegenerateInputError
from mileage_regression.models import NormalizedObservation, TrainingResult

IterationCallback = Callable[[int, float, float, float], None]


def cost(observations: Sequence[NormalizedObservation], beta0: float, beta1: float) -> float:
    """Mean squared error halved: `(1 / 2m) * sum((beta0 + beta1 * x - y) ** 2)`."""
    m = len(observations)
    total = 0.0
    for obs in observations:
        residual = beta0 + beta1 * obs.mileage - obs.price
        total += residual * residual
    return total / (2 * m)


def gradient_step(
    observations: Sequence[NormalizedObservation],
    beta0: float,
    beta1: float,
    learning_rate: float,
) -> tuple[float, float]:
    """Apply one simultaneous update of both parameters."""
    m = len(observations)
    sum_residual = 0.0
    sum_weighted = 0.0
    for obs in observations:
        residual = beta0 + beta1 * obs.mileage - obs.price
        sum_residual += residual
        sum_weighted += residual * obs.mileage
    grad0 = sum_residual / m
    grad1 = sum_weighted / m
    return beta0 - learning_rate * grad0, beta1 - learning_rate * grad1


def train(
    normalized_dataset: Sequence[NormalizedObservation],
    learning_rate: float,
    max_iterations: int,
    epsilon: float | None = None,
    on_iteration: IterationCallback | None = None,
) -> TrainingResult:
    """Fit `(beta0, beta1)` starting from zero.

    Stops after `max_iterations` iterations, or earlier when `epsilon` is given and
    the absolute cost change between two consecutive iterations drops below it. The
    learning rate is not validated and divergence is not detected: a non-finite or
    growing `final_cost` is for the caller to inspect.

    `on_iteration(iteration, beta0, beta1, cost)` is called after every update.
    """
    if not normalized_dataset:
        raise DegenerateInputError("Cannot train on an empty dataset.")

    beta0 = 0.0
    beta1 = 0.0
    iteration = 0
    current_cost = cost(normalized_dataset, beta0, beta1)
    previous_cost: float | None = None
    history: list[float] = []
    converged = False

    while iteration < max_iterations:
        beta0, beta1 = gradient_step(normalized_dataset, beta0, beta1, learning_rate)
        iteration += 1
        current_cost = cost(normalized_dataset, beta0, beta1)
        history.append(current_cost)
        if on_iteration is not None:
            on_iteration(iteration, beta0, beta1, current_cost)

        if epsilon is not None and previous_cost is not None:
            if abs(previous_cost - current_cost) < epsilon:
                converged = True
                break
        previous_cost = current_cost

    return TrainingResult(
        beta0=beta0,
        beta1=beta1,
        iterations_run=iteration,
        final_cost=current_cost,
        cost_history=history,
        converged=converged,
    )
