"""Load the bout CSV into a validated frame."""

from pathlib import Path
from typing import List, Tuple, Union
import csv
import logging

import pandas as pd

from boutstats.exceptions import SchemaError
from boutstats.normalization.schema import coerce_types, validate_columns

logger = logging.getLogger(__name__)


def read_bout_rows(path: Union[str, Path]) -> Tuple[List[str], List[List[str]]]:
    """Read header and rows, rejecting rows whose field count differs from the header."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bout file not found: {path}")
    with path.open(encoding="utf-8", newline="") as handle:
        reader = csv.reader(handle)
        try:
            header = next(reader)
        except StopIteration:
            raise SchemaError(f"{path} is empty; expected a header row") from None
        header = [name.strip() for name in header]
        rows = []
        for row in reader:
            if not row:
                continue
            if len(row) != len(header):
                raise SchemaError(
                    f"{path} data row {len(rows) + 1} (line {reader.line_num}): "
                    f"expected {len(header)} fields, got {len(row)}",
                    row=len(rows) + 1,
                )
            rows.append(row)
    return header, rows


def load_bouts(path: Union[str, Path]) -> pd.DataFrame:
    """Load and validate a bout CSV.

    Raises SchemaError on missing required columns, wrong field counts,
    non-numeric values in numeric columns, or unknown outcome labels. Row
    numbers count data rows from 1, skipping the header and blank lines.
    """
    header, rows = read_bout_rows(path)
    validate_columns(header)
    unnamed = [idx for idx, name in enumerate(header) if not name]
    if unnamed:
        # Leading unnamed column holds a written-out row index
        header = [name or f"_unnamed_{idx}" for idx, name in enumerate(header)]
    frame = pd.DataFrame(rows, columns=header, dtype=object)
    frame = frame.drop(columns=[header[idx] for idx in unnamed])
    dataset = coerce_types(frame)
    logger.info("Loaded %d bouts from %s", len(dataset), path)
    return dataset
