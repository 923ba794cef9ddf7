"""JSON summary of an analysis run."""

from pathlib import Path
from typing import Dict, Optional
import json
import logging
import math

import numpy as np
import pandas as pd

from boutstats.analysis.hypotheses import AdvantageTest
from boutstats.analysis.regression import RegressionResult
from boutstats.evaluation.metrics import MetricsSummary

logger = logging.getLogger(__name__)


def to_json_ready(value):
    """Convert numpy, pandas and NaN values into plain JSON types (NaN and inf become None)."""
    if isinstance(value, dict):
        return {str(key): to_json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_ready(item) for item in value]
    if isinstance(value, pd.DataFrame):
        return to_json_ready(value.to_dict(orient="records"))
    if isinstance(value, np.ndarray):
        return to_json_ready(value.tolist())
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        value = float(value)
        return value if math.isfinite(value) else None
    return value


def build_summary(
    row_counts: Dict[str, int],
    descriptives: Optional[pd.DataFrame] = None,
    outcomes: Optional[pd.DataFrame] = None,
    advantage_tests: Optional[Dict[str, AdvantageTest]] = None,
    regression: Optional[RegressionResult] = None,
    metrics: Optional[MetricsSummary] = None,
    majority_error: Optional[float] = None,
) -> Dict:
    return {
        "row_counts": dict(row_counts),
        "descriptives": descriptives.to_dict(orient="records") if descriptives is not None else None,
        "outcomes": outcomes.to_dict(orient="records") if outcomes is not None else None,
        "advantage_tests": {
            name: test.to_dict() for name, test in (advantage_tests or {}).items()
        },
        "regression": regression.to_dict() if regression else None,
        "classification": metrics.to_dict() if metrics else None,
        "majority_baseline_error": majority_error,
    }


def write_summary(summary: Dict, output_path: Path) -> str:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(to_json_ready(summary), indent=2, sort_keys=True, allow_nan=False),
        encoding="utf-8",
    )
    logger.info("Wrote summary to %s", output_path)
    return str(output_path)
