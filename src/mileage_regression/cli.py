"""CLI entrypoint for mileage/price linear regression."""

from __future__ import annotations

import math
import time
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from mileage_regression.config import ensure_output_root, load_config
from mileage_regression.dataset import load_dataset
from mileage_regression.evaluator import evaluate
from mileage_regression.exceptions import (
    DatasetParseError,
    DegenerateInputError,
    MissingRuntimeConfigError,
)
from mileage_regression.models import AppConfig, Observation
from mileage_regression.pipeline import fit
from mileage_regression.plotting import render_plot
from mileage_regression.predictor import predict_with
from mileage_regression.tracing import RunTraceCollector
from mileage_regression.weights import load_weights, write_weights

app = typer.Typer(help="Train and use a linear model of car price against mileage.")
console = Console()

_EXIT_DATASET = 2
_EXIT_CONFIG = 3
_EXIT_DEGENERATE = 4
_EXIT_DIVERGED = 5


def _vprint(enabled: bool, message: str) -> None:
    """Print verbose progress messages."""
    if enabled:
        console.print(f"[cyan]verbose:[/cyan] {escape(message)}")


def _configure_trace_streaming(trace: RunTraceCollector, enabled: bool) -> None:
    """Stream trace events to the console; warnings are shown even when not verbose."""

    def _sink(event: dict[str, Any]) -> None:
        if event.get("status") == "warning":
            console.print(f"[yellow]warning:[/yellow] {escape(str(event.get('details', '')))}")
            return
        if not enabled:
            return
        parts = [
            f"trace[{event.get('seq', '?')}]",
            f"{event.get('event_type', '')}",
            f"{event.get('component', '')}.{event.get('action', '')}",
            f"status={event.get('status', '')}",
        ]
        if event.get("iteration") != "":
            parts.append(f"iteration={event.get('iteration')}")
        if event.get("cost") != "":
            parts.append(f"cost={event.get('cost')}")
        if event.get("duration_ms") != "":
            parts.append(f"duration_ms={event.get('duration_ms')}")
        details = _truncate_details(str(event.get("details", "")))
        if details:
            parts.append(f"details={details}")
        _vprint(True, " ".join(parts))

    trace.set_live_sink(_sink)


def _truncate_details(text: str, max_len: int = 240) -> str:
    value = text.strip()
    if len(value) <= max_len:
        return value
    return f"{value[: max_len - 3]}..."


def _load_runtime_config(config: Path | None, overrides: dict[str, Any]) -> AppConfig:
    try:
        return load_config(config_path=config, overrides=overrides)
    except MissingRuntimeConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=_EXIT_CONFIG) from exc


def _load_observations(data_path: Path, trace: RunTraceCollector) -> list[Observation]:
    try:
        dataset = load_dataset(data_path)
    except DatasetParseError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=_EXIT_DATASET) from exc
    trace.log(
        event_type="run",
        component="cli",
        action="dataset_loaded",
        status="ok",
        details={"path": str(data_path), "observations": len(dataset)},
    )
    return dataset


@app.command("train")
def train_cmd(
    data: Annotated[Path | None, typer.Option(help="Path to the mileage,price CSV.")] = None,
    weights: Annotated[Path | None, typer.Option(help="Path of the weights file to write.")] = None,
    learning_rate: Annotated[
        float | None, typer.Option(help="Gradient descent step size.")
    ] = None,
    max_iterations: Annotated[
        int | None, typer.Option(help="Hard cap on gradient descent iterations.")
    ] = None,
    epsilon: Annotated[
        float | None,
        typer.Option(help="Stop early once the cost changes by less than this between iterations."),
    ] = None,
    trace_every: Annotated[
        int | None, typer.Option(help="Record one iteration trace event every N iterations.")
    ] = None,
    plot: Annotated[bool, typer.Option("--plot/--no-plot", help="Render the fitted line.")] = False,
    plot_file: Annotated[Path | None, typer.Option(help="Output PNG for --plot.")] = None,
    output_root: Annotated[str | None, typer.Option(help="Root directory for run traces.")] = None,
    config: Annotated[Path | None, typer.Option(help="Optional YAML config path.")] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Enable detailed logs. Enabled by default."),
    ] = True,
) -> None:
    """Train the model on the dataset and overwrite the weights file."""
    trace = RunTraceCollector()
    _configure_trace_streaming(trace, verbose)
    _vprint(verbose, "Loading runtime configuration (YAML + env + CLI overrides).")
    runtime_config = _load_runtime_config(
        config,
        {
            "data_file": str(data) if data is not None else None,
            "weights_file": str(weights) if weights is not None else None,
            "plot_file": str(plot_file) if plot_file is not None else None,
            "learning_rate": learning_rate,
            "max_iterations": max_iterations,
            "epsilon": epsilon,
            "trace_every": trace_every,
            "output_root": output_root,
        },
    )
    trace.log(
        event_type="run",
        component="cli",
        action="config_loaded",
        status="ok",
        details={
            "learning_rate": runtime_config.learning_rate,
            "max_iterations": runtime_config.max_iterations,
            "epsilon": runtime_config.epsilon,
        },
    )

    dataset = _load_observations(Path(runtime_config.data_file), trace)

    _vprint(verbose, f"Training on {len(dataset)} observations.")
    sampler = trace.iteration_logger(runtime_config.trace_every, runtime_config.max_iterations)
    started = time.perf_counter()
    try:
        report = fit(
            dataset,
            learning_rate=runtime_config.learning_rate,
            max_iterations=runtime_config.max_iterations,
            epsilon=runtime_config.epsilon,
            on_iteration=sampler,
        )
    except DegenerateInputError as exc:
        console.print(f"[red]{exc}[/red]")
        console.print("[red]No weights written.[/red]")
        raise typer.Exit(code=_EXIT_DEGENERATE) from exc
    duration_ms = int((time.perf_counter() - started) * 1000)

    training = report.training
    params = report.parameters
    sampler.finish(training.iterations_run, training.beta0, training.beta1, training.final_cost)
    trace.log(
        event_type="train",
        component="optimizer",
        action="trained",
        status="ok" if math.isfinite(training.final_cost) else "error",
        iteration=training.iterations_run,
        cost=training.final_cost,
        duration_ms=duration_ms,
        details={
            "beta0": training.beta0,
            "beta1": training.beta1,
            "converged": training.converged,
            "mileage_mean": report.mileage_stats.mean,
            "mileage_std": report.mileage_stats.std,
            "price_mean": report.price_stats.mean,
            "price_std": report.price_stats.std,
        },
    )

    if not all(math.isfinite(v) for v in (training.final_cost, params.theta0, params.theta1)):
        console.print(
            f"[red]Training diverged (final cost {training.final_cost}); "
            "lower the learning rate. No weights written.[/red]"
        )
        raise typer.Exit(code=_EXIT_DIVERGED)

    weights_path = write_weights(params, Path(runtime_config.weights_file))
    trace.log(
        event_type="run",
        component="weights",
        action="weights_written",
        status="ok",
        details={"path": str(weights_path), "theta0": params.theta0, "theta1": params.theta1},
    )

    if plot:
        plot_path = render_plot(dataset, params, Path(runtime_config.plot_file))
        _vprint(verbose, f"Plot written: {plot_path}")

    run_dir = _make_run_dir(ensure_output_root(runtime_config.output_root))
    trace_json = run_dir / "trace.json"
    trace_csv = run_dir / "trace.csv"
    trace.write_json(trace_json)
    trace.write_csv(trace_csv)
    _vprint(verbose, f"Trace artifacts written: {trace_json}, {trace_csv}")

    stop_reason = "converged" if training.converged else "iteration cap reached"
    console.print(
        f"[green]Trained.[/green] {training.iterations_run} iterations ({stop_reason}), "
        f"final cost {training.final_cost:.3e}"
    )
    console.print(f"theta0: {params.theta0}, theta1: {params.theta1}")
    console.print(f"[green]Weights written.[/green] {weights_path}")


@app.command("estimate")
def estimate_cmd(
    mileage: Annotated[
        float | None,
        typer.Option(help="Mileage to price. Prompted for when omitted."),
    ] = None,
    weights: Annotated[Path | None, typer.Option(help="Path to the weights file.")] = None,
    config: Annotated[Path | None, typer.Option(help="Optional YAML config path.")] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Enable detailed logs. Enabled by default."),
    ] = True,
) -> None:
    """Estimate the price of a car from its mileage."""
    trace = RunTraceCollector()
    _configure_trace_streaming(trace, verbose)
    runtime_config = _load_runtime_config(
        config, {"weights_file": str(weights) if weights is not None else None}
    )
    params = load_weights(Path(runtime_config.weights_file), trace=trace)

    if mileage is None:
        mileage = typer.prompt("Please input mileage", type=float)

    estimated_price = predict_with(params, mileage)
    console.print(f"Mileage: {mileage}")
    console.print(f"theta0: {params.theta0}, theta1: {params.theta1}")
    console.print(f"Estimated price: {estimated_price}")


@app.command("evaluate")
def evaluate_cmd(
    data: Annotated[Path | None, typer.Option(help="Path to the mileage,price CSV.")] = None,
    weights: Annotated[Path | None, typer.Option(help="Path to the weights file.")] = None,
    config: Annotated[Path | None, typer.Option(help="Optional YAML config path.")] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Enable detailed logs. Enabled by default."),
    ] = True,
) -> None:
    """Report how much of the price variance the persisted model explains."""
    trace = RunTraceCollector()
    _configure_trace_streaming(trace, verbose)
    runtime_config = _load_runtime_config(
        config,
        {
            "data_file": str(data) if data is not None else None,
            "weights_file": str(weights) if weights is not None else None,
        },
    )
    dataset = _load_observations(Path(runtime_config.data_file), trace)
    params = load_weights(Path(runtime_config.weights_file), trace=trace)
    try:
        quality = evaluate(dataset, params)
    except DegenerateInputError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=_EXIT_DEGENERATE) from exc

    console.print(
        f"The model explains {quality.r_squared * 100:.2f}% of the car's price's variance."
    )
    console.print(f"R^2 (R squared): {quality.r_squared:.2f} ({quality.band.value})")


@app.command("plot")
def plot_cmd(
    data: Annotated[Path | None, typer.Option(help="Path to the mileage,price CSV.")] = None,
    weights: Annotated[Path | None, typer.Option(help="Path to the weights file.")] = None,
    plot_file: Annotated[Path | None, typer.Option(help="Output PNG path.")] = None,
    data_only: Annotated[
        bool, typer.Option("--data-only", help="Plot observations without the fitted line.")
    ] = False,
    config: Annotated[Path | None, typer.Option(help="Optional YAML config path.")] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Enable detailed logs. Enabled by default."),
    ] = True,
) -> None:
    """Render the dataset and the persisted model as a PNG."""
    trace = RunTraceCollector()
    _configure_trace_streaming(trace, verbose)
    runtime_config = _load_runtime_config(
        config,
        {
            "data_file": str(data) if data is not None else None,
            "weights_file": str(weights) if weights is not None else None,
            "plot_file": str(plot_file) if plot_file is not None else None,
        },
    )
    dataset = _load_observations(Path(runtime_config.data_file), trace)
    params = load_weights(Path(runtime_config.weights_file), trace=trace)
    try:
        output = render_plot(dataset, params, Path(runtime_config.plot_file), data_only=data_only)
    except DegenerateInputError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=_EXIT_DEGENERATE) from exc
    console.print(f"[green]Plot written.[/green] {output}")


def _make_run_dir(root: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    run_dir = root / stamp
    suffix = 0
    while run_dir.exists():
        suffix += 1
        run_dir = root / f"{stamp}-{suffix}"
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


def main() -> None:
    """Script entrypoint."""
    app()


if __name__ == "__main__":
    main()
