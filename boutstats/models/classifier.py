"""Random-forest classifier collaborator."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier

from boutstats.exceptions import FitFailure


@dataclass(frozen=True)
class ClassifierConfig:
    name: str
    tree_count: int

    @classmethod
    def for_tree_count(cls, tree_count: int) -> "ClassifierConfig":
        return cls(name=f"trees_{tree_count}", tree_count=int(tree_count))


@dataclass(frozen=True)
class Formula:
    label: str
    predictors: Tuple[str, ...]

    @classmethod
    def of(cls, label: str, predictors: Sequence[str]) -> "Formula":
        return cls(label=label, predictors=tuple(predictors))

    def describe(self) -> str:
        return f"{self.label} ~ {' + '.join(self.predictors)}"


@dataclass
class ForestModel:
    config: ClassifierConfig
    formula: Formula
    estimator: RandomForestClassifier

    @property
    def classes(self) -> Tuple[str, ...]:
        return tuple(self.estimator.classes_)


def _design_matrix(frame: pd.DataFrame, formula: Formula, what: str) -> pd.DataFrame:
    missing = [col for col in formula.predictors if col not in frame.columns]
    if missing:
        raise FitFailure(f"{what} partition lacks predictors: {', '.join(missing)}")
    matrix = frame[list(formula.predictors)]
    if matrix.isna().any().any():
        raise FitFailure(f"{what} partition has missing predictor values")
    return matrix


def fit(
    training: pd.DataFrame,
    formula: Formula,
    config: ClassifierConfig,
    seed: Optional[int] = None,
    n_jobs: int = 1,
) -> ForestModel:
    """Fit a forest of ``config.tree_count`` trees on the training partition."""
    if training.empty:
        raise FitFailure("training partition is empty", config=config.name)
    if formula.label not in training.columns:
        raise FitFailure(f"training partition lacks label {formula.label!r}", config=config.name)
    matrix = _design_matrix(training, formula, "training")
    labels = training[formula.label]
    if labels.isna().any():
        raise FitFailure("training partition has missing labels", config=config.name)
    classes = labels.unique()
    if len(classes) < 2:
        raise FitFailure(
            f"training partition holds a single class ({classes[0]!r})",
            config=config.name,
        )

    estimator = RandomForestClassifier(
        n_estimators=config.tree_count,
        random_state=seed,
        n_jobs=n_jobs,
    )
    try:
        estimator.fit(matrix, labels.astype(str))
    except ValueError as exc:
        raise FitFailure(str(exc), config=config.name) from exc
    return ForestModel(config=config, formula=formula, estimator=estimator)


def predict_probability(
    model: ForestModel,
    test: pd.DataFrame,
    positive_class: str,
) -> np.ndarray:
    """Probability of ``positive_class`` for every test row, in [0, 1]."""
    classes = list(model.classes)
    if positive_class not in classes:
        raise FitFailure(
            f"positive class {positive_class!r} absent from fitted classes {classes}",
            config=model.config.name,
        )
    if test.empty:
        return np.empty(0, dtype=float)
    matrix = _design_matrix(test, model.formula, "test")
    probs = model.estimator.predict_proba(matrix)[:, classes.index(positive_class)]
    return np.clip(probs.astype(float), 0.0, 1.0)
