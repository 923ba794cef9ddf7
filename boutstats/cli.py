"""CLI entry points for bout analysis runs."""

from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import argparse
import hashlib
import json
import logging
import subprocess

import pandas as pd

from boutstats.analysis.hypotheses import AdvantageTest, advantage_test
from boutstats.analysis.regression import RegressionResult, fit_linear
from boutstats.analysis.summary import describe_attributes, outcome_distribution
from boutstats.config import Config
from boutstats.constants import (
    DIFFERENCE_ATTRIBUTES,
    NEGATIVE_CLASS,
    POSITIVE_CLASS,
    RESULT_COLUMN,
)
from boutstats.evaluation.metrics import (
    MetricsSummary,
    fold_error_rates,
    majority_baseline_error,
    mean_roc_curve,
    summarize,
)
from boutstats.evaluation.runner import EvaluationResult, run_cross_validation
from boutstats.exceptions import BoutStatsError, ConfigurationError, FitFailure
from boutstats.features.cleaning import filter_ranges
from boutstats.features.pipeline import derive_differences, exclude_draws
from boutstats.ingestion.bouts import load_bouts
from boutstats.models.classifier import ClassifierConfig, Formula
from boutstats.models.sampling import balanced_sample
from boutstats.ops.logging import configure_logging
from boutstats.ops.metrics import get_metrics_recorder
from boutstats.reporting.csv_output import write_frame_csv, write_rows_csv
from boutstats.reporting.summary_output import build_summary, write_summary
from boutstats.runtime.manifest import RunManifest
from boutstats.storage import FrameStorage

logger = logging.getLogger(__name__)


def _get_git_sha(repo_root: Path) -> Optional[str]:
    try:
        output = subprocess.check_output(
            ["git", "rev-parse", "HEAD"],
            cwd=str(repo_root),
            stderr=subprocess.DEVNULL,
        )
        return output.decode("utf-8").strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _hash_config(config: Config) -> str:
    payload = json.dumps(asdict(config), sort_keys=True).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _write_manifest(manifest: RunManifest, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / f"manifest_{manifest.run_id}.json"
    manifest.outputs["manifest"] = str(manifest_path)
    manifest_path.write_text(
        json.dumps(manifest.to_dict(), indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return manifest_path


def _resolve_config(
    config_path: Optional[str],
    data_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    seed: Optional[int] = None,
    folds: Optional[int] = None,
    per_class: Optional[int] = None,
    tree_counts: Optional[List[int]] = None,
) -> Config:
    config = Config.load(config_path=config_path)
    if data_path:
        config.data_path = data_path
    if output_dir:
        config.output_dir = output_dir
    if seed is not None:
        config.seed = seed
    if folds is not None:
        config.folds = folds
    if per_class is not None:
        config.sample_per_class = per_class
    if tree_counts:
        config.tree_counts = list(tree_counts)
    config.validate()
    return config


def _classifier_configs(config: Config) -> List[ClassifierConfig]:
    return [ClassifierConfig.for_tree_count(count) for count in config.tree_counts]


def _formula(config: Config, columns) -> Formula:
    missing = [col for col in config.predictors if col not in columns]
    if missing:
        raise ConfigurationError(f"predictors not present in dataset: {', '.join(missing)}")
    return Formula.of(RESULT_COLUMN, config.predictors)


def run_advantage_tests(dataset: pd.DataFrame, config: Config) -> Dict[str, AdvantageTest]:
    """One test per difference attribute, each cleaned on its own range only."""
    ranges = config.ranges()
    results: Dict[str, AdvantageTest] = {}
    for attr in DIFFERENCE_ATTRIBUTES:
        question = derive_differences(filter_ranges(dataset, {attr: ranges[attr]}), [attr])
        try:
            results[attr] = advantage_test(question, attr)
        except FitFailure as exc:
            logger.warning("Advantage test for %s skipped: %s", attr, exc)
            continue
        logger.info(
            "Larger %s won %d of %d bouts (p=%.3g)",
            attr,
            results[attr].advantaged_wins,
            results[attr].bouts,
            results[attr].binomial_p_value,
        )
    return results


def run_reach_regression(dataset: pd.DataFrame, config: Config) -> Optional[RegressionResult]:
    ranges = config.ranges()
    subset = filter_ranges(dataset, {"height": ranges["height"], "reach": ranges["reach"]})
    try:
        result = fit_linear(subset, "reach_A", "height_A")
    except FitFailure as exc:
        logger.warning("Reach/height regression skipped: %s", exc)
        return None
    logger.info(
        "reach_A ~ height_A: slope=%.4f r_squared=%.4f over %d rows",
        result.slope,
        result.r_squared,
        result.observations,
    )
    return result


def _advantage_rows(advantage_tests: Dict[str, AdvantageTest]) -> List[Dict]:
    rows = []
    for test in advantage_tests.values():
        row = test.to_dict()
        row.update(row.pop("cells"))
        rows.append(row)
    return rows


def prepare_classification_sample(
    cleaned: pd.DataFrame,
    config: Config,
    formula: Formula,
) -> pd.DataFrame:
    """Decisive bouts with complete predictors, balanced per outcome class."""
    decided = exclude_draws(cleaned)
    complete = decided.dropna(subset=list(formula.predictors))
    if len(complete) < len(decided):
        logger.info(
            "Dropped %d decisive bouts with missing predictors",
            len(decided) - len(complete),
        )
    return balanced_sample(complete, config.sample_per_class, seed=config.seed)


def run_classification(
    sample: pd.DataFrame,
    config: Config,
    formula: Formula,
) -> Tuple[EvaluationResult, MetricsSummary]:
    configs = _classifier_configs(config)
    evaluation = run_cross_validation(
        sample,
        configs,
        formula,
        folds=config.folds,
        seed=config.seed,
        positive_class=POSITIVE_CLASS,
        negative_class=NEGATIVE_CLASS,
        n_jobs=config.n_jobs,
    )
    metrics = summarize(
        evaluation.predictions,
        configs,
        positive_class=POSITIVE_CLASS,
        failures=evaluation.failures,
    )
    for summary in metrics.configs:
        logger.info(
            "%s: error=%.4f mean_auc=%.4f over %d folds",
            summary.name,
            summary.error_rate,
            summary.mean_auc,
            summary.folds_scored,
        )
    return evaluation, metrics


def _write_classification_outputs(
    evaluation: EvaluationResult,
    metrics: MetricsSummary,
    config: Config,
    output_dir: Path,
    manifest: RunManifest,
) -> None:
    manifest.outputs["predictions"] = write_frame_csv(
        evaluation.predictions, str(output_dir / "predictions.csv")
    )
    errors = fold_error_rates(evaluation.predictions, evaluation.configs)
    manifest.outputs["fold_errors"] = write_frame_csv(errors, str(output_dir / "fold_errors.csv"))
    roc_rows = []
    for cfg in evaluation.configs:
        curve = mean_roc_curve(
            evaluation.predictions,
            cfg,
            positive_class=POSITIVE_CLASS,
            grid_points=config.roc_grid_points,
        )
        for fpr, tpr in zip(curve["fpr"], curve["tpr"]):
            roc_rows.append({"config": cfg.name, "fpr": float(fpr), "tpr": float(tpr)})
    manifest.outputs["roc_curves"] = write_rows_csv(
        roc_rows, str(output_dir / "roc_curves.csv"), fieldnames=["config", "fpr", "tpr"]
    )
    manifest.fit_failures = [failure.to_dict() for failure in metrics.failures]


def run_analysis(
    config_path: Optional[str] = None,
    data_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    seed: Optional[int] = None,
    folds: Optional[int] = None,
    per_class: Optional[int] = None,
    tree_counts: Optional[List[int]] = None,
) -> int:
    """Run the analysis end-to-end and write its artifacts."""
    repo_root = Path(__file__).resolve().parents[1]
    manifest = RunManifest()
    configure_logging(run_id=manifest.run_id)
    try:
        config = _resolve_config(
            config_path, data_path, output_dir, seed, folds, per_class, tree_counts
        )
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    log_path = configure_logging(run_id=manifest.run_id, log_dir=config.output_dir)
    manifest.outputs["log"] = str(log_path)
    manifest.git_sha = _get_git_sha(repo_root)
    manifest.config_hash = _hash_config(config)
    manifest.seed = config.seed
    if config_path:
        logger.info("Loaded config from %s", config_path)

    out_dir = Path(config.output_dir)
    storage = FrameStorage(str(out_dir / "storage"))
    recorder = get_metrics_recorder()

    try:
        dataset = load_bouts(config.data_path)
        formula = _formula(config, dataset.columns)
        cleaned = derive_differences(filter_ranges(dataset, config.ranges()))
        manifest.row_counts["raw"] = len(dataset)
        manifest.row_counts["cleaned"] = len(cleaned)
        manifest.outputs["cleaned_bouts"] = storage.write_frame("cleaned_bouts", cleaned)

        descriptives = describe_attributes(cleaned)
        outcomes = outcome_distribution(cleaned)
        advantage_tests = run_advantage_tests(dataset, config)
        regression = run_reach_regression(dataset, config)

        sample = prepare_classification_sample(cleaned, config, formula)
        manifest.row_counts["balanced_sample"] = len(sample)
        evaluation, metrics = run_classification(sample, config, formula)
        logger.info(
            "Forest fits: %d succeeded, %d failed",
            recorder.counter("fit.success"),
            recorder.counter("fit.failures"),
        )
    except BoutStatsError as exc:
        logger.error("Analysis aborted: %s", exc)
        manifest.metrics = recorder.snapshot()
        _write_manifest(manifest, out_dir)
        return 1

    _write_classification_outputs(evaluation, metrics, config, out_dir, manifest)
    manifest.outputs["descriptives_table"] = storage.write_table("descriptives", descriptives)
    manifest.outputs["advantage_table"] = storage.write_table(
        "advantage_tests", _advantage_rows(advantage_tests)
    )
    manifest.outputs["fold_errors_table"] = storage.write_table(
        "fold_errors", fold_error_rates(evaluation.predictions, evaluation.configs)
    )
    summary = build_summary(
        row_counts=manifest.row_counts,
        descriptives=descriptives,
        outcomes=outcomes,
        advantage_tests=advantage_tests,
        regression=regression,
        metrics=metrics,
        majority_error=majority_baseline_error(sample[RESULT_COLUMN]),
    )
    manifest.outputs["summary"] = write_summary(summary, out_dir / "summary.json")
    manifest.metrics = recorder.snapshot()
    manifest_path = _write_manifest(manifest, out_dir)
    logger.info("Run manifest written to %s", manifest_path)
    return 0


def run_describe(config_path: Optional[str] = None, data_path: Optional[str] = None) -> int:
    """Print descriptive statistics and outcome counts for the cleaned data."""
    configure_logging()
    try:
        config = _resolve_config(config_path, data_path)
        dataset = load_bouts(config.data_path)
    except (BoutStatsError, FileNotFoundError) as exc:
        logger.error("Describe aborted: %s", exc)
        return 1
    cleaned = filter_ranges(dataset, config.ranges())
    print(describe_attributes(cleaned).to_string(index=False))
    print()
    print(outcome_distribution(cleaned).to_string(index=False))
    return 0


def run_evaluate(
    config_path: Optional[str] = None,
    data_path: Optional[str] = None,
    seed: Optional[int] = None,
    folds: Optional[int] = None,
    per_class: Optional[int] = None,
    tree_counts: Optional[List[int]] = None,
) -> int:
    """Run only the balanced cross-validation and print its summary."""
    configure_logging()
    try:
        config = _resolve_config(
            config_path, data_path, None, seed, folds, per_class, tree_counts
        )
        dataset = load_bouts(config.data_path)
        formula = _formula(config, dataset.columns)
        cleaned = filter_ranges(dataset, config.ranges())
        sample = prepare_classification_sample(cleaned, config, formula)
        _, metrics = run_classification(sample, config, formula)
    except (BoutStatsError, FileNotFoundError) as exc:
        logger.error("Evaluation aborted: %s", exc)
        return 1
    print(json.dumps(metrics.to_dict(), indent=2, sort_keys=True))
    return 0


def _parse_tree_counts(value: Optional[str]) -> Optional[List[int]]:
    if not value:
        return None
    try:
        return [int(item) for item in value.split(",") if item.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid tree counts: {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Boxing bout analysis CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analysis = subparsers.add_parser("run-analysis", help="Run the full analysis pipeline")
    analysis.add_argument("--config", dest="config_path", help="Path to config file")
    analysis.add_argument("--data-path", dest="data_path", help="Bout CSV path")
    analysis.add_argument("--output-dir", dest="output_dir", help="Output directory for artifacts")
    analysis.add_argument("--seed", dest="seed", type=int, help="Random seed")
    analysis.add_argument("--folds", dest="folds", type=int, help="Cross-validation folds")
    analysis.add_argument("--per-class", dest="per_class", type=int, help="Balanced rows per class")
    analysis.add_argument(
        "--trees",
        dest="tree_counts",
        type=_parse_tree_counts,
        help="Comma-separated forest sizes (default: 16,512)",
    )

    describe = subparsers.add_parser("describe", help="Summarize the cleaned dataset")
    describe.add_argument("--config", dest="config_path", help="Path to config file")
    describe.add_argument("--data-path", dest="data_path", help="Bout CSV path")

    evaluate = subparsers.add_parser("evaluate", help="Cross-validate the forest configurations")
    evaluate.add_argument("--config", dest="config_path", help="Path to config file")
    evaluate.add_argument("--data-path", dest="data_path", help="Bout CSV path")
    evaluate.add_argument("--seed", dest="seed", type=int, help="Random seed")
    evaluate.add_argument("--folds", dest="folds", type=int, help="Cross-validation folds")
    evaluate.add_argument("--per-class", dest="per_class", type=int, help="Balanced rows per class")
    evaluate.add_argument(
        "--trees",
        dest="tree_counts",
        type=_parse_tree_counts,
        help="Comma-separated forest sizes (default: 16,512)",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "run-analysis":
        return run_analysis(
            config_path=args.config_path,
            data_path=getattr(args, "data_path", None),
            output_dir=getattr(args, "output_dir", None),
            seed=getattr(args, "seed", None),
            folds=getattr(args, "folds", None),
            per_class=getattr(args, "per_class", None),
            tree_counts=getattr(args, "tree_counts", None),
        )
    if args.command == "describe":
        return run_describe(
            config_path=args.config_path,
            data_path=getattr(args, "data_path", None),
        )
    if args.command == "evaluate":
        return run_evaluate(
            config_path=args.config_path,
            data_path=getattr(args, "data_path", None),
            seed=getattr(args, "seed", None),
            folds=getattr(args, "folds", None),
            per_class=getattr(args, "per_class", None),
            tree_counts=getattr(args, "tree_counts", None),
        )

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
