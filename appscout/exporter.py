"""
CSV export: the last step of every run.

Each combined app becomes one row. Columns are the union of all fields seen,
so an app that's only in one store simply has empty cells for the other.
"""

import json
import os
from typing import Iterable

import pandas as pd

from appscout.config import OUTPUT_DIR

LEADING_COLUMNS = ["titleGoogle", "titleApple"]
TRAILING_COLUMNS = ["bothAppStores"]


def _columns(rows: list[dict]) -> list[str]:
    """All keys in first-seen order, titles first and the both-stores flag last."""
    fixed = set(LEADING_COLUMNS + TRAILING_COLUMNS)
    middle = []
    seen = set()
    for row in rows:
        for key in row:
            if key not in fixed and key not in seen:
                seen.add(key)
                middle.append(key)
    return LEADING_COLUMNS + middle + TRAILING_COLUMNS


def _cell(value):
    # Lists (screenshots, genres, ...) and dicts go out as JSON so they can be read back
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    if value is None:
        return ""
    return value


def csv_path(file_name: str, output_dir: str = OUTPUT_DIR) -> str:
    return os.path.join(output_dir, f"{file_name}.csv")


def to_dataframe(rows: Iterable[dict]) -> pd.DataFrame:
    rows = list(rows)
    columns = _columns(rows)
    data = [[_cell(row.get(col)) for col in columns] for row in rows]
    return pd.DataFrame(data, columns=columns)


def save_to_csv(rows: Iterable[dict], file_name: str, output_dir: str = OUTPUT_DIR) -> int:
    """
    Write rows to <output_dir>/<file_name>.csv.

    Missing fields are written as empty strings. The folder is created if needed.
    Disk/permission errors are not caught here: a failed export fails the run.

    Returns:
        Number of rows written.
    """
    df = to_dataframe(rows)

    os.makedirs(output_dir, exist_ok=True)
    path = csv_path(file_name, output_dir)
    df.to_csv(path, index=False, encoding="utf-8")

    print(f"Wrote {len(df)} apps to {path}")
    return len(df)


def load_csv(path: str) -> list[dict]:
    """Read an export back. Every value comes back as a string, empty cells as ""."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return df.to_dict(orient="records")
