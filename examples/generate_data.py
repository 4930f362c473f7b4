"""Generate a synthetic mileage/price dataset for demo/testing."""

from __future__ import annotations

import csv
import random
from pathlib import Path


def main(output_path: Path = Path("synthetic.csv"), n_rows: int = 200, seed: int = 7) -> None:
    random.seed(seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.writer(file_obj)
        writer.writerow(["km", "price"])
        for _ in range(n_rows):
            mileage = random.uniform(5_000, 250_000)
            noise = random.uniform(-600, 600)
            price = 8_500 - 0.021 * mileage + noise
            writer.writerow([round(mileage), round(max(price, 500.0), 2)])


if __name__ == "__main__":
    main()
