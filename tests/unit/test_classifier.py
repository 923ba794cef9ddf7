"""Unit tests for the random-forest collaborator."""

import numpy as np
import pytest

from boutstats.constants import DEFAULT_PREDICTORS
from boutstats.exceptions import FitFailure
from boutstats.models.classifier import ClassifierConfig, Formula, fit, predict_probability

FORMULA = Formula.of("result", DEFAULT_PREDICTORS)
CONFIG = ClassifierConfig.for_tree_count(8)


def test_config_name_follows_tree_count():
    assert CONFIG.name == "trees_8"
    assert CONFIG.tree_count == 8


def test_formula_describe():
    formula = Formula.of("result", ["age_A", "age_B"])

    assert formula.describe() == "result ~ age_A + age_B"


def test_probabilities_are_bounded(decided_bouts):
    training = decided_bouts.iloc[:300]
    test = decided_bouts.iloc[300:]
    model = fit(training, FORMULA, CONFIG, seed=1)
    probs = predict_probability(model, test, "win_B")

    assert probs.shape == (len(test),)
    assert np.all((probs >= 0.0) & (probs <= 1.0))
    assert set(model.classes) == {"win_A", "win_B"}


def test_same_seed_same_probabilities(decided_bouts):
    training = decided_bouts.iloc[:300]
    test = decided_bouts.iloc[300:]
    first = predict_probability(fit(training, FORMULA, CONFIG, seed=4), test, "win_B")
    second = predict_probability(fit(training, FORMULA, CONFIG, seed=4), test, "win_B")

    np.testing.assert_array_equal(first, second)


def test_single_class_training_is_fit_failure(decided_bouts):
    training = decided_bouts.loc[decided_bouts["result"] == "win_A"]

    with pytest.raises(FitFailure) as excinfo:
        fit(training, FORMULA, CONFIG)

    assert "single class" in excinfo.value.reason


def test_empty_training_is_fit_failure(decided_bouts):
    with pytest.raises(FitFailure):
        fit(decided_bouts.iloc[0:0], FORMULA, CONFIG)


def test_missing_predictor_is_fit_failure(decided_bouts):
    training = decided_bouts.drop(columns=["kos_B"])

    with pytest.raises(FitFailure) as excinfo:
        fit(training, FORMULA, CONFIG)

    assert "kos_B" in excinfo.value.reason


def test_missing_predictor_values_are_fit_failure(decided_bouts):
    training = decided_bouts.copy()
    training.loc[training.index[0], "age_A"] = np.nan

    with pytest.raises(FitFailure):
        fit(training, FORMULA, CONFIG)


def test_positive_class_absent_from_model(decided_bouts):
    model = fit(decided_bouts, FORMULA, CONFIG, seed=1)

    with pytest.raises(FitFailure):
        predict_probability(model, decided_bouts, "draw")
