from __future__ import annotations

import math

import pytest

from mileage_regression.exceptions import DegenerateInputError
from mileage_regression.models import NormalizedObservation, Observation
from mileage_regression.normalizer import normalize
from mileage_regression.optimizer import cost, gradient_step, train


def _normalized(dataset: list[Observation]) -> list[NormalizedObservation]:
    normalized, _, _ = normalize(dataset)
    return normalized


def test_cost_is_half_mean_squared_error() -> None:
    observations = [
        NormalizedObservation(mileage=1.0, price=1.0),
        NormalizedObservation(mileage=-1.0, price=1.0),
    ]
    # Residuals at (0, 0) are -1 and -1.
    assert cost(observations, 0.0, 0.0) == 0.5
    assert cost(observations, 1.0, 0.0) == 0.0


def test_gradient_step_updates_parameters_simultaneously() -> None:
    observations = [
        NormalizedObservation(mileage=1.0, price=2.0),
        NormalizedObservation(mileage=-1.0, price=0.0),
    ]
    # Residuals at (0, 0): -2 and 0. grad0 = -1, grad1 = -1.
    beta0, beta1 = gradient_step(observations, 0.0, 0.0, 0.5)
    assert beta0 == 0.5
    assert beta1 == 0.5


def test_zero_learning_rate_leaves_parameters_at_zero(car_dataset: list[Observation]) -> None:
    result = train(_normalized(car_dataset), learning_rate=0.0, max_iterations=250)
    assert result.beta0 == 0.0
    assert result.beta1 == 0.0
    assert result.iterations_run == 250


def test_train_is_deterministic(car_dataset: list[Observation]) -> None:
    normalized = _normalized(car_dataset)
    first = train(normalized, learning_rate=0.05, max_iterations=500, epsilon=1e-12)
    second = train(normalized, learning_rate=0.05, max_iterations=500, epsilon=1e-12)
    assert first.as_tuple() == second.as_tuple()
    assert first.cost_history == second.cost_history


def test_cost_does_not_increase_in_convergent_regime(car_dataset: list[Observation]) -> None:
    result = train(_normalized(car_dataset), learning_rate=0.1, max_iterations=60)
    history = result.cost_history
    assert len(history) == 60
    for before, after in zip(history, history[1:], strict=False):
        assert after <= before
    assert result.final_cost == history[-1]


def test_train_without_epsilon_runs_to_cap(linear_dataset: list[Observation]) -> None:
    result = train(_normalized(linear_dataset), learning_rate=0.1, max_iterations=1000)
    assert result.iterations_run == 1000
    assert result.converged is False
    assert result.final_cost < 1e-6
    assert math.isclose(result.beta1, -1.0, abs_tol=1e-9)
    assert math.isclose(result.beta0, 0.0, abs_tol=1e-12)


def test_train_with_epsilon_stops_early(linear_dataset: list[Observation]) -> None:
    result = train(
        _normalized(linear_dataset), learning_rate=0.1, max_iterations=100000, epsilon=1e-9
    )
    assert result.iterations_run < 100000
    assert result.converged is True
    assert len(result.cost_history) == result.iterations_run


def test_epsilon_check_waits_for_a_previous_cost(linear_dataset: list[Observation]) -> None:
    # A huge epsilon still needs two costs to compare.
    result = train(_normalized(linear_dataset), learning_rate=0.1, max_iterations=50, epsilon=1e9)
    assert result.iterations_run == 2
    assert result.converged is True


def test_zero_iterations_reports_initial_cost(linear_dataset: list[Observation]) -> None:
    normalized = _normalized(linear_dataset)
    result = train(normalized, learning_rate=0.1, max_iterations=0)
    assert result.iterations_run == 0
    assert result.as_tuple() == (0.0, 0.0, 0, cost(normalized, 0.0, 0.0))
    assert result.cost_history == []


def test_large_learning_rate_diverges_without_raising(car_dataset: list[Observation]) -> None:
    result = train(_normalized(car_dataset), learning_rate=5.0, max_iterations=200)
    assert result.iterations_run == 200
    assert not math.isfinite(result.final_cost) or result.final_cost > result.cost_history[0]


def test_on_iteration_receives_every_update(linear_dataset: list[Observation]) -> None:
    seen: list[tuple[int, float]] = []
    result = train(
        _normalized(linear_dataset),
        learning_rate=0.1,
        max_iterations=5,
        on_iteration=lambda i, _b0, _b1, c: seen.append((i, c)),
    )
    assert [item[0] for item in seen] == [1, 2, 3, 4, 5]
    assert seen[-1][1] == result.final_cost


def test_train_rejects_empty_dataset() -> None:
    with pytest.raises(DegenerateInputError):
        train([], learning_rate=0.1, max_iterations=10)
