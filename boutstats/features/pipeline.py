"""Derived difference features and per-question exclusions."""

from typing import Iterable, Optional
import logging

import pandas as pd

from boutstats.constants import (
    DIFF_COLUMNS,
    DIFFERENCE_ATTRIBUTES,
    DRAW,
    RESULT_COLUMN,
    diff_column,
    paired_columns,
)
from boutstats.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def derive_differences(
    dataset: pd.DataFrame,
    attributes: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Add ``<attr>_diff = <attr>_A - <attr>_B`` for each paired attribute."""
    output = dataset.copy()
    for attr in attributes or DIFFERENCE_ATTRIBUTES:
        side_a, side_b = paired_columns(attr)
        output[diff_column(attr)] = output[side_a] - output[side_b]
    return output


def exclude_draws(dataset: pd.DataFrame) -> pd.DataFrame:
    """Drop draws and rows without an outcome."""
    outcome = dataset[RESULT_COLUMN]
    keep = outcome.notna() & (outcome != DRAW)
    return dataset.loc[keep].copy()


def exclude_for_question(dataset: pd.DataFrame, diff_field: str) -> pd.DataFrame:
    """Prepare rows for an "does the advantaged side win" question.

    Draws are dropped, as are rows where ``diff_field`` is exactly zero or
    missing, since neither side holds the advantage there.
    """
    field = DIFF_COLUMNS.get(diff_field, diff_field)
    if field not in dataset.columns:
        raise ConfigurationError(
            f"difference field {field!r} not present; run derive_differences first"
        )
    decided = exclude_draws(dataset)
    diffs = decided[field]
    output = decided.loc[diffs.notna() & (diffs != 0)].copy()
    logger.debug(
        "Question on %s keeps %d of %d rows", field, len(output), len(dataset)
    )
    return output
