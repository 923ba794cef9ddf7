"""Unit tests for error rates, AUC and config comparison."""

import math

import numpy as np
import pandas as pd
import pytest

from boutstats.evaluation.metrics import (
    auc_by_fold,
    compare_error_rates,
    error_rate,
    fold_error_rates,
    majority_baseline_error,
    mean_roc_curve,
    summarize,
)
from boutstats.evaluation.runner import FitFailureRecord
from boutstats.exceptions import FitFailure
from boutstats.models.classifier import ClassifierConfig

SMALL = ClassifierConfig.for_tree_count(16)
LARGE = ClassifierConfig.for_tree_count(512)


def _predictions(n_folds=4, per_fold=20, seed=0):
    """Predictions where the large config separates the classes perfectly."""
    rng = np.random.default_rng(seed)
    rows = []
    for fold in range(1, n_folds + 1):
        for i in range(per_fold):
            observed = "win_B" if i % 2 else "win_A"
            truth = 1.0 if observed == "win_B" else 0.0
            small_prob = float(np.clip(0.5 + (truth - 0.5) * 0.4 + rng.normal(0, 0.2), 0, 1))
            large_prob = 0.9 if truth else 0.1
            rows.append({
                "fold": fold,
                "row": len(rows),
                "observed": observed,
                "prob_trees_16": small_prob,
                "pred_trees_16": "win_B" if small_prob > 0.5 else "win_A",
                "prob_trees_512": large_prob,
                "pred_trees_512": "win_B" if large_prob > 0.5 else "win_A",
            })
    return pd.DataFrame(rows)


def test_error_rate_counts_mismatches():
    assert error_rate(["win_A", "win_B", "win_B", "win_A"], ["win_A", "win_A", "win_B", "win_B"]) == 0.5
    assert math.isnan(error_rate([], []))


def test_majority_baseline_is_minority_share():
    labels = ["win_A"] * 7 + ["win_B"] * 3

    assert majority_baseline_error(labels) == pytest.approx(0.3)
    assert majority_baseline_error(["win_A"] * 5 + ["win_B"] * 5) == pytest.approx(0.5)


def test_majority_predictor_error_equals_minority_share():
    config = ClassifierConfig.for_tree_count(1)
    observed = ["win_A"] * 7 + ["win_B"] * 3
    predictions = pd.DataFrame({
        "fold": [1, 2] * 5,
        "row": range(10),
        "observed": observed,
        "prob_trees_1": 0.2,
        "pred_trees_1": "win_A",
    })

    pooled = fold_error_rates(predictions.assign(fold=1), [config])
    assert pooled["error"].tolist() == [pytest.approx(0.3)]
    summary = summarize(predictions, [config], "win_B")
    assert summary.configs[0].error_rate == pytest.approx(majority_baseline_error(observed))


def test_error_rate_is_mean_of_fold_error_rates():
    config = ClassifierConfig.for_tree_count(1)
    # Fold 1: 1 of 2 wrong; fold 2: 0 of 8 wrong
    predictions = pd.DataFrame({
        "fold": [1] * 2 + [2] * 8,
        "row": range(10),
        "observed": ["win_A", "win_B"] + ["win_A", "win_B"] * 4,
        "prob_trees_1": [0.2, 0.2] + [0.2, 0.8] * 4,
        "pred_trees_1": ["win_A", "win_A"] + ["win_A", "win_B"] * 4,
    })
    summary = summarize(predictions, [config], "win_B")

    assert summary.configs[0].fold_errors == {1: 0.5, 2: 0.0}
    assert summary.configs[0].error_rate == pytest.approx(0.25)


def test_fold_error_rates_one_row_per_fold_and_config():
    errors = fold_error_rates(_predictions(), [SMALL, LARGE])

    assert len(errors) == 8
    assert set(errors["config"]) == {"trees_16", "trees_512"}
    assert (errors.loc[errors["config"] == "trees_512", "error"] == 0.0).all()
    assert errors["error"].between(0.0, 1.0).all()


def test_failed_fold_is_absent_from_error_table():
    predictions = _predictions()
    mask = predictions["fold"] == 2
    predictions.loc[mask, "prob_trees_16"] = np.nan
    predictions.loc[mask, "pred_trees_16"] = None
    errors = fold_error_rates(predictions, [SMALL, LARGE])

    small = errors.loc[errors["config"] == "trees_16"]
    assert sorted(small["fold"]) == [1, 3, 4]


def test_perfect_separation_has_unit_auc():
    aucs = auc_by_fold(_predictions(), LARGE, "win_B")

    assert sorted(aucs) == [1, 2, 3, 4]
    assert all(value == pytest.approx(1.0) for value in aucs.values())


def test_single_class_fold_has_undefined_auc():
    predictions = _predictions()
    predictions = predictions.loc[~((predictions["fold"] == 3) & (predictions["observed"] == "win_B"))]
    aucs = auc_by_fold(predictions, SMALL, "win_B")

    assert math.isnan(aucs[3])
    assert not math.isnan(aucs[1])


def test_mean_roc_curve_spans_unit_square():
    curve = mean_roc_curve(_predictions(), SMALL, "win_B", grid_points=11)

    assert len(curve) == 11
    assert curve["fpr"].iloc[0] == 0.0
    assert curve["tpr"].iloc[0] == 0.0
    assert curve["fpr"].iloc[-1] == 1.0
    assert curve["tpr"].iloc[-1] == 1.0
    assert curve["tpr"].is_monotonic_increasing


def test_comparison_reports_baseline_and_effect():
    errors = pd.DataFrame({
        "fold": [1, 2, 3, 1, 2, 3],
        "config": ["trees_16"] * 3 + ["trees_512"] * 3,
        "error": [0.30, 0.32, 0.34, 0.25, 0.27, 0.29],
        "rows": [20] * 6,
    })
    comparison = compare_error_rates(errors)

    assert comparison.baseline == "trees_16"
    assert comparison.terms[0].estimate == pytest.approx(0.32)
    effect = comparison.effect("trees_512")
    assert effect.estimate == pytest.approx(-0.05)
    assert 0.0 <= effect.p_value <= 1.0
    assert comparison.residual_dof == 4


def test_comparison_needs_two_configs():
    errors = pd.DataFrame({"fold": [1, 2], "config": ["trees_16"] * 2, "error": [0.3, 0.4], "rows": [5, 5]})

    with pytest.raises(FitFailure):
        compare_error_rates(errors)


def test_summarize_bounds_and_effect():
    failures = [FitFailureRecord(fold=9, config="trees_16", reason="synthetic")]
    summary = summarize(_predictions(), [SMALL, LARGE], "win_B", failures=failures)

    small = summary.for_config("trees_16")
    large = summary.for_config("trees_512")
    for config in (small, large):
        assert 0.0 <= config.error_rate <= 1.0
        assert 0.0 <= config.mean_auc <= 1.0
        assert config.folds_scored == 4
    assert large.error_rate == 0.0
    assert large.mean_auc == pytest.approx(1.0)
    assert small.effect is None
    assert large.effect == pytest.approx(large.error_rate - small.error_rate)
    payload = summary.to_dict()
    assert payload["failures"] == [{"fold": 9, "config": "trees_16", "reason": "synthetic"}]
    assert payload["comparison"]["baseline"] == "trees_16"


def test_summarize_with_one_config_skips_comparison():
    summary = summarize(_predictions(), [LARGE], "win_B")

    assert summary.comparison is None
    assert summary.configs[0].effect is None
