from __future__ import annotations

from pathlib import Path

import pytest

from mileage_regression.models import Observation

LINEAR_POINTS = [(10000.0, 20000.0), (20000.0, 18000.0), (30000.0, 16000.0), (40000.0, 14000.0)]

CAR_POINTS = [
    (240000.0, 3650.0),
    (139800.0, 3800.0),
    (150500.0, 4400.0),
    (185530.0, 4450.0),
    (176000.0, 5250.0),
    (114800.0, 5350.0),
    (166800.0, 5800.0),
    (89000.0, 5990.0),
    (144500.0, 5999.0),
    (84000.0, 6200.0),
    (82029.0, 6390.0),
    (63060.0, 6390.0),
    (74000.0, 6600.0),
    (97500.0, 6800.0),
    (67000.0, 6800.0),
    (76025.0, 6900.0),
    (48235.0, 6900.0),
    (93000.0, 6990.0),
    (60949.0, 7490.0),
    (65674.0, 7555.0),
    (54000.0, 7990.0),
    (68500.0, 7990.0),
    (22899.0, 7990.0),
    (61789.0, 8290.0),
]


def build_data_csv(
    path: Path,
    points: list[tuple[float, float]],
    header: str | None = "km,price",
) -> Path:
    lines = [header] if header is not None else []
    lines.extend(f"{mileage:g},{price:g}" for mileage, price in points)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def linear_dataset() -> list[Observation]:
    return [Observation(mileage=m, price=p) for m, p in LINEAR_POINTS]


@pytest.fixture
def car_dataset() -> list[Observation]:
    return [Observation(mileage=m, price=p) for m, p in CAR_POINTS]


@pytest.fixture
def linear_csv_path(tmp_path: Path) -> Path:
    return build_data_csv(tmp_path / "data.csv", LINEAR_POINTS)


@pytest.fixture
def car_csv_path(tmp_path: Path) -> Path:
    return build_data_csv(tmp_path / "data.csv", CAR_POINTS)


@pytest.fixture
def constant_csv_path(tmp_path: Path) -> Path:
    return build_data_csv(tmp_path / "constant.csv", [(15000.0, 10000.0)])


_CONFIG_ENV_KEYS = [
    "MILEAGE_LR_DATA_FILE",
    "MILEAGE_LR_WEIGHTS_FILE",
    "MILEAGE_LR_PLOT_FILE",
    "MILEAGE_LR_LEARNING_RATE",
    "MILEAGE_LR_MAX_ITERATIONS",
    "MILEAGE_LR_EPSILON",
    "MILEAGE_LR_TRACE_EVERY",
    "MILEAGE_LR_OUTPUT_ROOT",
]


@pytest.fixture(autouse=True)
def isolated_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Setting then deleting makes monkeypatch restore "unset" at teardown, which also
    # drops values that load_dotenv writes straight into os.environ.
    for key in _CONFIG_ENV_KEYS:
        monkeypatch.setenv(key, "unset")
        monkeypatch.delenv(key)
