"""Simple linear regression between two bout attributes."""

from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd
from scipy import stats

from boutstats.exceptions import FitFailure


@dataclass
class RegressionResult:
    response: str
    predictor: str
    intercept: float
    slope: float
    intercept_stderr: float
    slope_stderr: float
    p_values: Dict[str, float]
    r_squared: float
    residuals: np.ndarray
    fitted_values: np.ndarray
    observations: int

    @property
    def coefficients(self) -> Dict[str, float]:
        return {"intercept": self.intercept, self.predictor: self.slope}

    def to_dict(self) -> Dict:
        return {
            "formula": f"{self.response} ~ {self.predictor}",
            "coefficients": {k: round(v, 6) for k, v in self.coefficients.items()},
            "std_errors": {
                "intercept": round(self.intercept_stderr, 6),
                self.predictor: round(self.slope_stderr, 6),
            },
            "p_values": dict(self.p_values),
            "r_squared": round(self.r_squared, 6),
            "residual_std": round(float(np.std(self.residuals, ddof=2)), 6),
            "observations": self.observations,
        }


def fit_linear(dataset: pd.DataFrame, response: str, predictor: str) -> RegressionResult:
    """Ordinary least squares fit of ``response ~ predictor`` over complete rows."""
    for column in (response, predictor):
        if column not in dataset.columns:
            raise FitFailure(f"regression column {column!r} not in dataset")
    frame = dataset[[predictor, response]].dropna()
    if len(frame) < 3:
        raise FitFailure(f"need at least 3 complete rows for {response} ~ {predictor}, got {len(frame)}")
    x = frame[predictor].to_numpy(dtype=float)
    y = frame[response].to_numpy(dtype=float)
    if np.ptp(x) == 0:
        raise FitFailure(f"predictor {predictor!r} is constant")

    fit = stats.linregress(x, y)
    dof = len(frame) - 2
    if fit.intercept_stderr > 0:
        t_intercept = fit.intercept / fit.intercept_stderr
        p_intercept = float(2.0 * stats.t.sf(abs(t_intercept), dof))
    else:
        p_intercept = 0.0
    fitted = fit.intercept + fit.slope * x
    return RegressionResult(
        response=response,
        predictor=predictor,
        intercept=float(fit.intercept),
        slope=float(fit.slope),
        intercept_stderr=float(fit.intercept_stderr),
        slope_stderr=float(fit.stderr),
        p_values={"intercept": p_intercept, predictor: float(fit.pvalue)},
        r_squared=float(fit.rvalue ** 2),
        residuals=y - fitted,
        fitted_values=fitted,
        observations=len(frame),
    )
