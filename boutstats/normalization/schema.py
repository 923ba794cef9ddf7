"""Schema validation for bout tables."""

from typing import Iterable, List

import numpy as np
import pandas as pd

from boutstats.constants import (
    JUDGE_COLUMNS,
    NUMERIC_COLUMNS,
    OUTCOMES,
    REQUIRED_COLUMNS,
    RESULT_COLUMN,
)
from boutstats.exceptions import SchemaError

MISSING_TOKENS = {"", "na", "nan", "null", "none"}


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return str(value).strip().lower() in MISSING_TOKENS


def validate_columns(columns: Iterable[str]) -> None:
    """Raise SchemaError if any required column is absent."""
    present = set(columns)
    missing = [field for field in REQUIRED_COLUMNS if field not in present]
    if missing:
        raise SchemaError(
            f"bout table missing required columns: {', '.join(missing)}",
            field=missing[0],
        )


def _numeric_columns(frame: pd.DataFrame) -> List[str]:
    return [col for col in NUMERIC_COLUMNS + JUDGE_COLUMNS if col in frame.columns]


def _coerce_numeric(series: pd.Series, column: str) -> pd.Series:
    missing = series.map(_is_missing)
    raw = series.map(lambda value: None if _is_missing(value) else str(value).strip())
    values = pd.to_numeric(raw, errors="coerce")
    bad = values.isna() & ~missing
    if bad.any():
        position = int(np.flatnonzero(bad.to_numpy())[0])
        offending = series.iloc[position]
        raise SchemaError(
            f"non-numeric value {offending!r} in column {column!r} at data row {position + 1}",
            field=column,
            row=position + 1,
            value=str(offending),
        )
    return values.astype(float)


def _coerce_result(series: pd.Series) -> pd.Series:
    missing = series.map(_is_missing)
    labels = pd.Series(
        [None if flag else str(value).strip() for value, flag in zip(series, missing)],
        index=series.index,
        dtype=object,
    )
    unknown = labels.notna() & ~labels.isin(OUTCOMES)
    if unknown.any():
        position = int(np.flatnonzero(unknown.to_numpy())[0])
        offending = series.iloc[position]
        raise SchemaError(
            f"unknown outcome {offending!r} in column {RESULT_COLUMN!r} at data row {position + 1}; "
            f"expected one of {', '.join(OUTCOMES)}",
            field=RESULT_COLUMN,
            row=position + 1,
            value=str(offending),
        )
    return labels


def coerce_types(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with numeric columns as floats and outcomes validated.

    Missing cells become NaN (numeric) or None (outcome). Anything else
    that fails to parse raises SchemaError naming the column, row and value.
    """
    validate_columns(frame.columns)
    output = frame.copy()
    for column in _numeric_columns(output):
        output[column] = _coerce_numeric(output[column], column)
    output[RESULT_COLUMN] = _coerce_result(output[RESULT_COLUMN])
    return output
