"""Class-balanced sampling."""

from typing import Optional, Sequence
import logging

import numpy as np
import pandas as pd

from boutstats.constants import NEGATIVE_CLASS, POSITIVE_CLASS, RESULT_COLUMN
from boutstats.exceptions import ConfigurationError, RangeExhaustion

logger = logging.getLogger(__name__)

DEFAULT_CLASSES = (NEGATIVE_CLASS, POSITIVE_CLASS)


def balanced_sample(
    dataset: pd.DataFrame,
    per_class: int,
    seed: int,
    label: str = RESULT_COLUMN,
    classes: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Draw ``per_class`` rows without replacement from every class.

    Classes default to the two decisive outcomes. Any class holding fewer
    than ``per_class`` rows (including none at all) raises RangeExhaustion;
    a short sample is never returned. The same seed and input always give
    the same sample.
    """
    if per_class <= 0:
        raise ConfigurationError(f"per_class must be positive, got {per_class}")
    wanted = sorted(classes if classes is not None else DEFAULT_CLASSES)
    labels = dataset[label]

    members = {}
    for class_label in wanted:
        rows = dataset.loc[labels == class_label]
        if len(rows) < per_class:
            raise RangeExhaustion(class_label, per_class, len(rows))
        members[class_label] = rows

    rng = np.random.default_rng(seed)
    parts = []
    for class_label in wanted:
        rows = members[class_label]
        chosen = rng.choice(len(rows), size=per_class, replace=False)
        parts.append(rows.iloc[chosen])
    sample = pd.concat(parts).reset_index(drop=True)
    logger.info(
        "Balanced sample of %d rows (%d per class over %s, seed=%s)",
        len(sample),
        per_class,
        wanted,
        seed,
    )
    return sample
