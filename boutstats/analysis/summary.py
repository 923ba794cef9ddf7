"""Descriptive statistics for cleaned bout tables."""

from typing import Iterable, Optional

import pandas as pd

from boutstats.constants import OUTCOMES, PHYSICAL_ATTRIBUTES, RESULT_COLUMN, SIDES, side_column


def describe_attributes(
    dataset: pd.DataFrame,
    attributes: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Count, mean, std, min, quartiles and max per attribute and side."""
    rows = []
    for attr in attributes or PHYSICAL_ATTRIBUTES:
        for side in SIDES:
            column = side_column(attr, side)
            if column not in dataset.columns:
                continue
            stats = dataset[column].describe()
            rows.append({
                "attribute": attr,
                "side": side,
                "count": int(stats["count"]),
                "mean": stats.get("mean"),
                "std": stats.get("std"),
                "min": stats.get("min"),
                "q25": stats.get("25%"),
                "median": stats.get("50%"),
                "q75": stats.get("75%"),
                "max": stats.get("max"),
            })
    return pd.DataFrame(rows)


def outcome_distribution(dataset: pd.DataFrame) -> pd.DataFrame:
    counts = dataset[RESULT_COLUMN].value_counts().reindex(OUTCOMES, fill_value=0)
    total = int(counts.sum())
    return pd.DataFrame({
        "outcome": counts.index,
        "count": counts.to_numpy(dtype=int),
        "proportion": (counts / total).to_numpy() if total else [0.0] * len(counts),
    })
