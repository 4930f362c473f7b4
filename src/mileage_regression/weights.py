"""Persistence of fitted parameters as a single `theta0,theta1` line."""

from __future__ import annotations

from pathlib import Path

from mileage_regression.exceptions import MalformedModelError
from mileage_regression.models import ModelParameters
from mileage_regression.tracing import RunTraceCollector


def write_weights(params: ModelParameters, output_path: Path) -> Path:
    """Overwrite the weights file with `theta0,theta1`."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(f"{params.theta0!r},{params.theta1!r}\n", encoding="utf-8")
    return output_path


def read_weights(weights_path: Path) -> ModelParameters:
    """Parse a weights file strictly."""
    try:
        text = weights_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedModelError(f"Could not read weights file {weights_path}: {exc}") from exc

    parts = text.strip().split(",")
    if len(parts) != 2:
        raise MalformedModelError(
            f"Weights file {weights_path} must contain 'theta0,theta1', got {text.strip()!r}."
        )
    try:
        theta0, theta1 = (float(part.strip()) for part in parts)
    except ValueError as exc:
        raise MalformedModelError(
            f"Weights file {weights_path} does not hold two numbers: {text.strip()!r}."
        ) from exc
    return ModelParameters(theta0=theta0, theta1=theta1)


def load_weights(
    weights_path: Path,
    trace: RunTraceCollector | None = None,
) -> ModelParameters:
    """Read weights, falling back to `(0.0, 0.0)` when missing or malformed."""
    if not weights_path.exists():
        _log_fallback(trace, f"Weights file not found: {weights_path}; using defaults.")
        return ModelParameters()
    try:
        params = read_weights(weights_path)
    except MalformedModelError as exc:
        _log_fallback(trace, f"{exc} Using defaults.")
        return ModelParameters()
    if trace is not None:
        trace.log(
            event_type="run",
            component="weights",
            action="weights_loaded",
            status="ok",
            details={"path": str(weights_path), "theta0": params.theta0, "theta1": params.theta1},
        )
    return params


def _log_fallback(trace: RunTraceCollector | None, message: str) -> None:
    if trace is None:
        return
    trace.log(
        event_type="run",
        component="weights",
        action="weights_fallback",
        status="warning",
        details=message,
    )
