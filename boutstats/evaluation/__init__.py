"""Cross-validated evaluation of classifier configurations."""

from boutstats.evaluation.metrics import (
    ComparisonResult,
    ConfigSummary,
    MetricsSummary,
    auc_by_fold,
    compare_error_rates,
    fold_error_rates,
    majority_baseline_error,
    mean_roc_curve,
    summarize,
)
from boutstats.evaluation.runner import (
    EvaluationResult,
    FitFailureRecord,
    evaluate_folds,
    run_cross_validation,
)

__all__ = [
    "ComparisonResult",
    "ConfigSummary",
    "MetricsSummary",
    "auc_by_fold",
    "compare_error_rates",
    "fold_error_rates",
    "majority_baseline_error",
    "mean_roc_curve",
    "summarize",
    "EvaluationResult",
    "FitFailureRecord",
    "evaluate_folds",
    "run_cross_validation",
]
