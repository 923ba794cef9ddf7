"""Does the side holding a physical advantage win more often?"""

from dataclasses import dataclass
from typing import Dict, Optional
import logging

import numpy as np
import pandas as pd
from scipy import stats

from boutstats.constants import DIFF_COLUMNS, RESULT_COLUMN, WIN_A, WIN_B
from boutstats.exceptions import FitFailure
from boutstats.features.pipeline import exclude_for_question

logger = logging.getLogger(__name__)


def advantage_table(dataset: pd.DataFrame, diff_field: str) -> pd.DataFrame:
    """2x2 counts of (side with the larger value) x (winner).

    Rows ``A``/``B`` name the side whose value is larger; columns are the
    ``win_A``/``win_B`` outcomes. Draws and zero differences are excluded.
    """
    field = DIFF_COLUMNS.get(diff_field, diff_field)
    decided = exclude_for_question(dataset, field)
    larger = np.where(decided[field] > 0, "A", "B")
    table = pd.crosstab(
        pd.Series(larger, index=decided.index, name="larger"),
        decided[RESULT_COLUMN].rename("winner"),
    )
    return table.reindex(index=["A", "B"], columns=[WIN_A, WIN_B], fill_value=0).astype(int)


@dataclass
class AdvantageTest:
    attribute: str
    table: pd.DataFrame
    bouts: int
    advantaged_wins: int
    advantaged_win_rate: float
    binomial_p_value: float
    chi2: Optional[float]
    chi2_p_value: Optional[float]

    def cells(self) -> Dict[str, int]:
        return {
            "larger_A_win_A": int(self.table.loc["A", WIN_A]),
            "larger_A_win_B": int(self.table.loc["A", WIN_B]),
            "larger_B_win_A": int(self.table.loc["B", WIN_A]),
            "larger_B_win_B": int(self.table.loc["B", WIN_B]),
        }

    def to_dict(self) -> Dict:
        return {
            "attribute": self.attribute,
            "cells": self.cells(),
            "bouts": self.bouts,
            "advantaged_wins": self.advantaged_wins,
            "advantaged_win_rate": round(self.advantaged_win_rate, 6),
            "binomial_p_value": self.binomial_p_value,
            "chi2": self.chi2,
            "chi2_p_value": self.chi2_p_value,
        }


def advantage_test(dataset: pd.DataFrame, diff_field: str) -> AdvantageTest:
    """Binomial test of the larger side's win rate against 1/2 plus a chi-square independence test."""
    table = advantage_table(dataset, diff_field)
    bouts = int(table.to_numpy().sum())
    if bouts == 0:
        raise FitFailure(f"no decisive bouts with a non-zero {diff_field} difference")
    advantaged_wins = int(table.loc["A", WIN_A] + table.loc["B", WIN_B])
    binomial = stats.binomtest(advantaged_wins, bouts, p=0.5, alternative="two-sided")

    chi2 = None
    chi2_p = None
    try:
        result = stats.chi2_contingency(table.to_numpy())
        chi2 = float(result[0])
        chi2_p = float(result[1])
    except ValueError as exc:
        logger.warning("Chi-square test skipped for %s: %s", diff_field, exc)

    return AdvantageTest(
        attribute=diff_field,
        table=table,
        bouts=bouts,
        advantaged_wins=advantaged_wins,
        advantaged_win_rate=advantaged_wins / bouts,
        binomial_p_value=float(binomial.pvalue),
        chi2=chi2,
        chi2_p_value=chi2_p,
    )
