"""Two-column (mileage, price) dataset loading."""

from __future__ import annotations

import csv
import math
from pathlib import Path

from mileage_regression.exceptions import DatasetParseError
from mileage_regression.models import Observation


def load_dataset(data_path: Path) -> list[Observation]:
    """Load observations from a `mileage,price` table.

    The first non-blank record is treated as a header when it does not parse as two
    numbers (e.g. `km,price`). Blank lines are skipped; anything else that is not two
    numbers raises `DatasetParseError`.
    """
    if not data_path.exists():
        raise DatasetParseError(f"Dataset file does not exist: {data_path}")

    observations: list[Observation] = []
    header_checked = False
    with data_path.open(encoding="utf-8", newline="") as file_obj:
        for line_no, row in enumerate(csv.reader(file_obj), start=1):
            if not row or all(not cell.strip() for cell in row):
                continue
            parsed = _parse_record(row)
            if parsed is None:
                if not header_checked:
                    header_checked = True
                    continue
                raise DatasetParseError(
                    f"{data_path}:{line_no}: expected two numbers 'mileage,price', "
                    f"got {','.join(row)!r}"
                )
            header_checked = True
            # float() also accepts "nan" and "inf".
            if not all(math.isfinite(value) for value in parsed):
                raise DatasetParseError(
                    f"{data_path}:{line_no}: mileage and price must be finite numbers, "
                    f"got {','.join(row)!r}"
                )
            observations.append(Observation(mileage=parsed[0], price=parsed[1]))
    return observations


def _parse_record(row: list[str]) -> tuple[float, float] | None:
    if len(row) != 2:
        return None
    try:
        mileage, price = float(row[0].strip()), float(row[1].strip())
    except ValueError:
        return None
    return mileage, price
