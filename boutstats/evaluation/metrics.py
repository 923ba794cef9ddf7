"""Aggregate per-fold predictions into error, AUC and comparison summaries.

Scalar AUC per config is the mean of the per-fold AUCs. ``mean_roc_curve``
vertically averages the per-fold curves on a fixed false-positive grid and is
only meant for display; it is never integrated into the reported AUC.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence
import logging
import math

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import roc_auc_score, roc_curve

from boutstats.constants import POSITIVE_CLASS
from boutstats.evaluation.runner import FitFailureRecord, pred_column, prob_column
from boutstats.exceptions import FitFailure
from boutstats.models.classifier import ClassifierConfig

logger = logging.getLogger(__name__)


def _clean_float(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return round(value, 6)


def error_rate(observed: Sequence, predicted: Sequence) -> float:
    """Fraction of rows where the predicted label differs from the observed one."""
    observed = np.asarray(observed)
    predicted = np.asarray(predicted)
    if observed.size == 0:
        return float("nan")
    return float(np.mean(observed != predicted))


def majority_baseline_error(labels: Sequence) -> float:
    """Error of always predicting the most common label (the minority share)."""
    counts = pd.Series(labels).dropna().value_counts()
    total = int(counts.sum())
    if total == 0:
        return float("nan")
    return 1.0 - int(counts.max()) / total


def fold_error_rates(
    predictions: pd.DataFrame,
    configs: Sequence[ClassifierConfig],
) -> pd.DataFrame:
    """Long table of (fold, config, error, rows); failed fold/configs are absent."""
    rows = []
    for config in configs:
        column = pred_column(config)
        if column not in predictions.columns:
            continue
        scored = predictions.loc[predictions[column].notna()]
        for fold, group in scored.groupby("fold", sort=True):
            rows.append({
                "fold": int(fold),
                "config": config.name,
                "error": error_rate(group["observed"], group[column]),
                "rows": len(group),
            })
    return pd.DataFrame(rows, columns=["fold", "config", "error", "rows"])


@dataclass
class ComparisonTerm:
    name: str
    estimate: float
    std_error: float
    t_value: float
    p_value: float

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "estimate": _clean_float(self.estimate),
            "std_error": _clean_float(self.std_error),
            "t_value": _clean_float(self.t_value),
            "p_value": _clean_float(self.p_value),
        }


@dataclass
class ComparisonResult:
    """OLS fit of ``error ~ config`` with the baseline config as intercept."""

    baseline: str
    terms: List[ComparisonTerm]
    r_squared: float
    residual_dof: int
    observations: int

    def effect(self, config_name: str) -> Optional[ComparisonTerm]:
        for term in self.terms:
            if term.name == config_name:
                return term
        return None

    def to_dict(self) -> Dict:
        return {
            "baseline": self.baseline,
            "terms": [term.to_dict() for term in self.terms],
            "r_squared": _clean_float(self.r_squared),
            "residual_dof": self.residual_dof,
            "observations": self.observations,
        }


def compare_error_rates(errors: pd.DataFrame, baseline: Optional[str] = None) -> ComparisonResult:
    """Regress fold error rates on config indicators.

    The first term is the baseline's mean error (intercept); each further
    term is the difference between that config and the baseline, with a
    two-sided t test against zero. Descriptive only.
    """
    if errors.empty:
        raise FitFailure("no fold error rates to compare")
    names = list(dict.fromkeys(errors["config"]))
    if baseline is None:
        baseline = names[0]
    if baseline not in names:
        raise FitFailure(f"baseline config {baseline!r} has no fold error rates")
    others = [name for name in names if name != baseline]
    if not others:
        raise FitFailure("need at least two configs to compare error rates")

    y = errors["error"].to_numpy(dtype=float)
    design = np.column_stack(
        [np.ones(len(errors))]
        + [(errors["config"] == name).to_numpy(dtype=float) for name in others]
    )
    n_obs, n_params = design.shape
    dof = n_obs - n_params
    if dof <= 0:
        raise FitFailure(f"{n_obs} fold error rates cannot support {n_params} parameters")

    beta, _, _, _ = np.linalg.lstsq(design, y, rcond=None)
    residuals = y - design @ beta
    rss = float(residuals @ residuals)
    sigma2 = rss / dof
    cov = sigma2 * np.linalg.pinv(design.T @ design)
    std_errors = np.sqrt(np.clip(np.diag(cov), 0.0, None))
    with np.errstate(divide="ignore", invalid="ignore"):
        t_values = beta / std_errors
    p_values = 2.0 * stats.t.sf(np.abs(t_values), dof)

    tss = float(((y - y.mean()) ** 2).sum())
    r_squared = 1.0 - rss / tss if tss > 0 else float("nan")

    terms = [
        ComparisonTerm(
            name=name,
            estimate=float(beta[idx]),
            std_error=float(std_errors[idx]),
            t_value=float(t_values[idx]),
            p_value=float(p_values[idx]),
        )
        for idx, name in enumerate([baseline] + others)
    ]
    return ComparisonResult(
        baseline=baseline,
        terms=terms,
        r_squared=r_squared,
        residual_dof=dof,
        observations=n_obs,
    )


def _scored(predictions: pd.DataFrame, config: ClassifierConfig) -> pd.DataFrame:
    column = prob_column(config)
    if column not in predictions.columns:
        return predictions.iloc[0:0]
    return predictions.loc[predictions[column].notna()]


def auc_by_fold(
    predictions: pd.DataFrame,
    config: ClassifierConfig,
    positive_class: str = POSITIVE_CLASS,
) -> Dict[int, float]:
    """AUROC of one config on each fold; NaN where a fold holds a single class."""
    output: Dict[int, float] = {}
    column = prob_column(config)
    for fold, group in _scored(predictions, config).groupby("fold", sort=True):
        truth = (group["observed"] == positive_class).astype(int).to_numpy()
        if truth.min() == truth.max():
            logger.warning("Fold %d holds one class; AUC undefined for %s", fold, config.name)
            output[int(fold)] = float("nan")
            continue
        output[int(fold)] = float(roc_auc_score(truth, group[column].to_numpy()))
    return output


def mean_roc_curve(
    predictions: pd.DataFrame,
    config: ClassifierConfig,
    positive_class: str = POSITIVE_CLASS,
    grid_points: int = 101,
) -> pd.DataFrame:
    """Per-fold ROC curves averaged vertically at fixed false-positive rates."""
    grid = np.linspace(0.0, 1.0, grid_points)
    curves = []
    column = prob_column(config)
    for _, group in _scored(predictions, config).groupby("fold", sort=True):
        truth = (group["observed"] == positive_class).astype(int).to_numpy()
        if truth.min() == truth.max():
            continue
        fpr, tpr, _ = roc_curve(truth, group[column].to_numpy())
        interpolated = np.interp(grid, fpr, tpr)
        interpolated[0] = 0.0
        curves.append(interpolated)
    if not curves:
        return pd.DataFrame({"fpr": grid, "tpr": np.full(grid_points, np.nan)})
    mean_tpr = np.mean(curves, axis=0)
    mean_tpr[-1] = 1.0
    return pd.DataFrame({"fpr": grid, "tpr": mean_tpr})


@dataclass
class ConfigSummary:
    name: str
    tree_count: int
    error_rate: float
    mean_auc: float
    auc_std: float
    folds_scored: int
    fold_errors: Dict[int, float] = field(default_factory=dict)
    fold_aucs: Dict[int, float] = field(default_factory=dict)
    effect: Optional[float] = None
    effect_p_value: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "tree_count": self.tree_count,
            "error_rate": _clean_float(self.error_rate),
            "mean_auc": _clean_float(self.mean_auc),
            "auc_std": _clean_float(self.auc_std),
            "folds_scored": self.folds_scored,
            "fold_errors": {str(k): _clean_float(v) for k, v in self.fold_errors.items()},
            "fold_aucs": {str(k): _clean_float(v) for k, v in self.fold_aucs.items()},
            "effect": _clean_float(self.effect),
            "effect_p_value": _clean_float(self.effect_p_value),
        }


@dataclass
class MetricsSummary:
    configs: List[ConfigSummary]
    comparison: Optional[ComparisonResult]
    failures: List[FitFailureRecord] = field(default_factory=list)

    def for_config(self, name: str) -> Optional[ConfigSummary]:
        for summary in self.configs:
            if summary.name == name:
                return summary
        return None

    def to_dict(self) -> Dict:
        return {
            "configs": [summary.to_dict() for summary in self.configs],
            "comparison": self.comparison.to_dict() if self.comparison else None,
            "failures": [failure.to_dict() for failure in self.failures],
        }


def summarize(
    predictions: pd.DataFrame,
    configs: Sequence[ClassifierConfig],
    positive_class: str = POSITIVE_CLASS,
    failures: Iterable[FitFailureRecord] = (),
    baseline: Optional[str] = None,
) -> MetricsSummary:
    """Error rate (mean over folds), mean per-fold AUC and effect vs the baseline."""
    errors = fold_error_rates(predictions, configs)
    comparison = None
    try:
        comparison = compare_error_rates(errors, baseline=baseline)
    except FitFailure as exc:
        logger.warning("Error-rate comparison skipped: %s", exc)

    summaries = []
    for config in configs:
        config_errors = errors.loc[errors["config"] == config.name]
        fold_errors = dict(zip(config_errors["fold"].astype(int), config_errors["error"]))
        fold_aucs = auc_by_fold(predictions, config, positive_class)
        auc_values = np.array([v for v in fold_aucs.values() if not math.isnan(v)])
        effect = None
        effect_p = None
        if comparison is not None and config.name != comparison.baseline:
            term = comparison.effect(config.name)
            if term is not None:
                effect = term.estimate
                effect_p = term.p_value
        summaries.append(ConfigSummary(
            name=config.name,
            tree_count=config.tree_count,
            error_rate=float(np.mean(list(fold_errors.values()))) if fold_errors else float("nan"),
            mean_auc=float(auc_values.mean()) if auc_values.size else float("nan"),
            auc_std=float(auc_values.std(ddof=1)) if auc_values.size > 1 else float("nan"),
            folds_scored=len(fold_errors),
            fold_errors=fold_errors,
            fold_aucs=fold_aucs,
            effect=effect,
            effect_p_value=effect_p,
        ))
    return MetricsSummary(configs=summaries, comparison=comparison, failures=list(failures))
