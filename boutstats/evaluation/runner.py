"""Fold-by-fold training and scoring of classifier configurations."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np
import pandas as pd

from boutstats.constants import DECISION_THRESHOLD, NEGATIVE_CLASS, POSITIVE_CLASS
from boutstats.exceptions import ConfigurationError, FitFailure
from boutstats.models.classifier import ClassifierConfig, Formula, fit, predict_probability
from boutstats.models.folds import FoldAssignment, split_fold, stratified_folds, validate_assignment
from boutstats.ops.metrics import MetricsRecorder, get_metrics_recorder

logger = logging.getLogger(__name__)


def prob_column(config: ClassifierConfig) -> str:
    return f"prob_{config.name}"


def pred_column(config: ClassifierConfig) -> str:
    return f"pred_{config.name}"


@dataclass
class FitFailureRecord:
    fold: int
    config: str
    reason: str

    def to_dict(self) -> Dict:
        return {"fold": self.fold, "config": self.config, "reason": self.reason}


@dataclass
class EvaluationResult:
    predictions: pd.DataFrame
    configs: List[ClassifierConfig]
    folds: int
    failures: List[FitFailureRecord] = field(default_factory=list)

    def failed(self, fold: int, config_name: str) -> bool:
        return any(f.fold == fold and f.config == config_name for f in self.failures)


def _fit_seed(seed: int, fold: int, config_index: int) -> int:
    # Independent stream per fold/config so results do not depend on loop order
    state = np.random.SeedSequence([int(seed), int(fold), int(config_index)]).generate_state(1)
    return int(state[0])


def _check_configs(configs: Sequence[ClassifierConfig]) -> None:
    if not configs:
        raise ConfigurationError("at least one classifier configuration is required")
    names = [cfg.name for cfg in configs]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"classifier configuration names must be unique, got {names}")


def evaluate_folds(
    dataset: pd.DataFrame,
    assignment: FoldAssignment,
    configs: Sequence[ClassifierConfig],
    formula: Formula,
    positive_class: str = POSITIVE_CLASS,
    negative_class: str = NEGATIVE_CLASS,
    seed: int = 0,
    n_jobs: int = 1,
    recorder: Optional[MetricsRecorder] = None,
) -> EvaluationResult:
    """Fit every config on each fold's training rows and score its held-out rows.

    Returns one prediction row per held-out record with the fold index, the
    observed label and, per config, ``prob_<name>`` and ``pred_<name>``
    (positive when the probability exceeds 0.5). A config that
    fails on a fold leaves its cells empty for that fold and is listed in
    ``failures``; the remaining folds and configs still run.
    """
    _check_configs(configs)
    if formula.label not in dataset.columns:
        raise ConfigurationError(f"label column {formula.label!r} not in dataset")
    validate_assignment(assignment, len(dataset))
    recorder = recorder or get_metrics_recorder()

    failures: List[FitFailureRecord] = []
    batches = []
    for fold in sorted(assignment):
        training, test = split_fold(dataset, assignment, fold)
        batch = pd.DataFrame({
            "fold": fold,
            "row": np.sort(np.asarray(assignment[fold], dtype=int)),
            "observed": test[formula.label].to_numpy(),
        })
        for idx, config in enumerate(configs):
            try:
                with recorder.timed("fold.fit_ms"):
                    model = fit(
                        training,
                        formula,
                        config,
                        seed=_fit_seed(seed, fold, idx),
                        n_jobs=n_jobs,
                    )
                    probs = predict_probability(model, test, positive_class)
            except FitFailure as exc:
                logger.warning("Fit failed on fold %d for %s: %s", fold, config.name, exc.reason)
                recorder.increment("fit.failures")
                failures.append(FitFailureRecord(fold=fold, config=config.name, reason=exc.reason))
                batch[prob_column(config)] = np.nan
                batch[pred_column(config)] = None
                continue
            recorder.increment("fit.success")
            batch[prob_column(config)] = probs
            batch[pred_column(config)] = np.where(probs > DECISION_THRESHOLD, positive_class, negative_class)
        logger.debug("Fold %d scored %d held-out rows", fold, len(batch))
        batches.append(batch)

    predictions = pd.concat(batches, ignore_index=True)
    logger.info(
        "Evaluated %d configs over %d folds (%d prediction rows, %d fit failures)",
        len(configs),
        len(assignment),
        len(predictions),
        len(failures),
    )
    return EvaluationResult(
        predictions=predictions,
        configs=list(configs),
        folds=len(assignment),
        failures=failures,
    )


def run_cross_validation(
    dataset: pd.DataFrame,
    configs: Sequence[ClassifierConfig],
    formula: Formula,
    folds: int = 10,
    seed: int = 0,
    positive_class: str = POSITIVE_CLASS,
    negative_class: str = NEGATIVE_CLASS,
    n_jobs: int = 1,
    recorder: Optional[MetricsRecorder] = None,
) -> EvaluationResult:
    """Build stratified folds for ``dataset`` and evaluate every config on them."""
    _check_configs(configs)
    if formula.label not in dataset.columns:
        raise ConfigurationError(f"label column {formula.label!r} not in dataset")
    dataset = dataset.reset_index(drop=True)
    assignment = stratified_folds(dataset[formula.label].to_numpy(), folds, seed)
    return evaluate_folds(
        dataset,
        assignment,
        configs,
        formula,
        positive_class=positive_class,
        negative_class=negative_class,
        seed=seed,
        n_jobs=n_jobs,
        recorder=recorder,
    )
