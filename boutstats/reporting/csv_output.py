"""CSV output helpers."""

from typing import Dict, List, Optional, Sequence
from pathlib import Path
import csv

import pandas as pd


def write_rows_csv(
    rows: List[Dict],
    output_path: str,
    fieldnames: Optional[Sequence[str]] = None,
) -> str:
    """Write dict rows to CSV.

    Without ``fieldnames`` the header is the first row's keys followed by
    any keys that only appear later. With no rows, only the header is written.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    columns = list(fieldnames or [])
    if not columns:
        for row in rows:
            columns.extend(key for key in row if key not in columns)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=columns, restval="")
        if columns:
            writer.writeheader()
        writer.writerows(rows)
    return str(path)


def write_frame_csv(frame: pd.DataFrame, output_path: str) -> str:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    return str(path)
