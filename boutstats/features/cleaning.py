"""Range-based filtering of invalid or missing values."""

from typing import Dict, List, Mapping, Tuple
import logging

import pandas as pd

from boutstats.constants import paired_columns
from boutstats.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Bounds = Tuple[float, float]


def resolve_range_columns(
    columns, ranges: Mapping[str, Bounds]
) -> Dict[str, Bounds]:
    """Expand attribute base names into their side A / side B columns.

    ``{"age": (15, 50)}`` tracks ``age_A`` and ``age_B``; a concrete column
    name such as ``won_A`` is tracked as-is.
    """
    present = set(columns)
    resolved: Dict[str, Bounds] = {}
    for name, bounds in ranges.items():
        low, high = bounds
        if low > high:
            raise ConfigurationError(
                f"range for {name!r} has lower bound {low} above upper bound {high}"
            )
        if name in present:
            resolved[name] = (low, high)
            continue
        side_a, side_b = paired_columns(name)
        if side_a in present and side_b in present:
            resolved[side_a] = (low, high)
            resolved[side_b] = (low, high)
            continue
        raise ConfigurationError(f"no column or attribute pair named {name!r}")
    return resolved


def filter_ranges(dataset: pd.DataFrame, ranges: Mapping[str, Bounds]) -> pd.DataFrame:
    """Keep rows whose tracked columns all fall inside their inclusive range.

    Missing values never satisfy a range, so they are dropped rather than
    imputed. The input frame is left untouched.
    """
    tracked = resolve_range_columns(dataset.columns, ranges)
    keep = pd.Series(True, index=dataset.index)
    dropped: List[str] = []
    for column, (low, high) in tracked.items():
        in_range = dataset[column].between(low, high, inclusive="both")
        removed = int((keep & ~in_range).sum())
        if removed:
            dropped.append(f"{column}={removed}")
        keep &= in_range
    cleaned = dataset.loc[keep].copy()
    logger.info(
        "Range filter kept %d of %d rows (%s)",
        len(cleaned),
        len(dataset),
        ", ".join(dropped) or "nothing dropped",
    )
    if cleaned.empty:
        logger.warning("Range filter removed every row for %s", sorted(tracked))
    return cleaned
