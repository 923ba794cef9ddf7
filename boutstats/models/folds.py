"""Stratified k-fold assignment."""

from typing import Dict, Sequence, Tuple
import logging

import numpy as np
import pandas as pd
from sklearn.model_selection import StratifiedKFold

from boutstats.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FoldAssignment = Dict[int, np.ndarray]


def stratified_folds(labels: Sequence, k: int, seed: int) -> FoldAssignment:
    """Map fold index (1..k) to the positional indices held out in that fold.

    Class proportions are approximately preserved in every fold and the
    held-out sets partition ``range(len(labels))``.
    """
    labels = np.asarray(labels)
    n_rows = len(labels)
    if k < 2:
        raise ConfigurationError(f"fold count must be >= 2, got {k}")
    if k > n_rows:
        raise ConfigurationError(f"fold count {k} exceeds dataset size {n_rows}")
    if pd.isna(labels).any():
        raise ConfigurationError("labels contain missing values; drop them before splitting")
    counts = pd.Series(labels).value_counts()
    if int(counts.min()) < k:
        raise ConfigurationError(
            f"class {counts.idxmin()!r} has {int(counts.min())} rows, fewer than {k} folds"
        )
    logger.debug("Splitting %d rows into %d folds (class counts %s)", n_rows, k, counts.to_dict())

    splitter = StratifiedKFold(n_splits=k, shuffle=True, random_state=seed)
    assignment: FoldAssignment = {}
    for fold, (_, held_out) in enumerate(splitter.split(np.zeros(n_rows), labels), start=1):
        assignment[fold] = np.sort(held_out)
    return assignment


def validate_assignment(assignment: FoldAssignment, n_rows: int) -> None:
    """Raise ConfigurationError unless the held-out sets partition ``range(n_rows)``."""
    if not assignment:
        raise ConfigurationError("fold assignment is empty")
    seen = np.zeros(n_rows, dtype=int)
    for fold, held_out in assignment.items():
        held_out = np.asarray(held_out, dtype=int)
        if held_out.size and (held_out.min() < 0 or held_out.max() >= n_rows):
            raise ConfigurationError(f"fold {fold} holds indices outside 0..{n_rows - 1}")
        np.add.at(seen, held_out, 1)
    if (seen != 1).any():
        duplicated = int((seen > 1).sum())
        uncovered = int((seen == 0).sum())
        raise ConfigurationError(
            f"fold assignment is not a partition: {duplicated} rows repeated, {uncovered} rows uncovered"
        )


def split_fold(
    dataset: pd.DataFrame,
    assignment: FoldAssignment,
    fold: int,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Return (training, test) partitions for one fold."""
    if fold not in assignment:
        raise ConfigurationError(f"unknown fold {fold}; expected one of {sorted(assignment)}")
    held_out = np.zeros(len(dataset), dtype=bool)
    held_out[assignment[fold]] = True
    return dataset.iloc[~held_out], dataset.iloc[held_out]
