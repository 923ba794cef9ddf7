"""
Column names and outcome labels for bout records.

Mirrors the layout of the public boxing bouts CSV: paired side A / side B
attributes, past-record counters, the outcome label and judge scorecards.
"""

from typing import Dict, List, Tuple


# =============================================================================
# SIDES & OUTCOMES
# =============================================================================

SIDES: Tuple[str, str] = ("A", "B")

RESULT_COLUMN = "result"
WIN_A = "win_A"
WIN_B = "win_B"
DRAW = "draw"
OUTCOMES: List[str] = [WIN_A, WIN_B, DRAW]

# Probability scores and ROC curves are computed against this class
POSITIVE_CLASS = WIN_B
NEGATIVE_CLASS = WIN_A

# Predicted label is the positive class only when its probability is strictly above this
DECISION_THRESHOLD = 0.5


# =============================================================================
# ATTRIBUTES
# =============================================================================

PHYSICAL_ATTRIBUTES: List[str] = ["age", "height", "reach", "weight"]
RECORD_COUNTERS: List[str] = ["won", "lost", "drawn", "kos"]
DIFFERENCE_ATTRIBUTES: List[str] = ["age", "height", "reach"]

TEXT_COLUMNS: List[str] = ["stance_A", "stance_B", "decision"]
JUDGE_COLUMNS: List[str] = [
    f"judge{idx}_{side}" for idx in (1, 2, 3) for side in SIDES
]


def side_column(attribute: str, side: str) -> str:
    """Column name for an attribute on one side, e.g. ``height_A``."""
    return f"{attribute}_{side}"


def paired_columns(attribute: str) -> Tuple[str, str]:
    return side_column(attribute, "A"), side_column(attribute, "B")


def diff_column(attribute: str) -> str:
    return f"{attribute}_diff"


NUMERIC_COLUMNS: List[str] = [
    side_column(attr, side)
    for attr in PHYSICAL_ATTRIBUTES + RECORD_COUNTERS
    for side in SIDES
]

REQUIRED_COLUMNS: List[str] = NUMERIC_COLUMNS + [RESULT_COLUMN]

DIFF_COLUMNS: Dict[str, str] = {
    attr: diff_column(attr) for attr in DIFFERENCE_ATTRIBUTES
}

# Predictors handed to the forest when no formula is configured
DEFAULT_PREDICTORS: List[str] = list(NUMERIC_COLUMNS)
