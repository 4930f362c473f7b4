from __future__ import annotations

from pathlib import Path

import pytest

from mileage_regression.dataset import load_dataset
from mileage_regression.exceptions import DatasetParseError
from mileage_regression.models import Observation


def test_load_dataset_skips_header(linear_csv_path: Path) -> None:
    dataset = load_dataset(linear_csv_path)
    assert dataset[0] == Observation(mileage=10000.0, price=20000.0)
    assert len(dataset) == 4


def test_load_dataset_without_header(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("240000,3650\n139800,3800\n", encoding="utf-8")
    dataset = load_dataset(path)
    assert [obs.mileage for obs in dataset] == [240000.0, 139800.0]
    assert [obs.price for obs in dataset] == [3650.0, 3800.0]


def test_load_dataset_ignores_blank_lines_and_whitespace(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("km,price\n\n 1000 , 500.5 \n\n2000,400\n", encoding="utf-8")
    dataset = load_dataset(path)
    assert dataset == [
        Observation(mileage=1000.0, price=500.5),
        Observation(mileage=2000.0, price=400.0),
    ]


def test_load_dataset_header_only_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("km,price\n", encoding="utf-8")
    assert load_dataset(path) == []


def test_load_dataset_reports_line_of_bad_record(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("km,price\n1000,500\n2000,abc\n", encoding="utf-8")
    with pytest.raises(DatasetParseError, match=":3:"):
        load_dataset(path)


def test_load_dataset_rejects_extra_columns(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("1000,500\n2000,400,1\n", encoding="utf-8")
    with pytest.raises(DatasetParseError, match="expected two numbers"):
        load_dataset(path)


def test_load_dataset_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetParseError, match="does not exist"):
        load_dataset(tmp_path / "missing.csv")


@pytest.mark.parametrize("record", ["nan,400", "2000,inf", "-inf,400"])
def test_load_dataset_rejects_non_finite_record(tmp_path: Path, record: str) -> None:
    path = tmp_path / "data.csv"
    path.write_text(f"km,price\n1000,500\n{record}\n3000,300\n", encoding="utf-8")
    with pytest.raises(DatasetParseError, match=r":3: mileage and price must be finite"):
        load_dataset(path)


def test_load_dataset_does_not_take_nan_first_line_for_header(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("nan,400\n1000,500\n", encoding="utf-8")
    with pytest.raises(DatasetParseError, match=":1:"):
        load_dataset(path)
