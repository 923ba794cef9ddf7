"""Configuration for analysis runs."""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict, List, Tuple
import json
import os

from boutstats.constants import DEFAULT_PREDICTORS
from boutstats.exceptions import ConfigurationError


_DEFAULT_DATA_PATH = "data/bouts_out_new.csv"
_DEFAULT_OUTPUT_DIR = ".cache/boutstats"
_DEFAULT_SEED = 1
_DEFAULT_FOLDS = 10
_DEFAULT_SAMPLE_PER_CLASS = 1000
_DEFAULT_TREE_COUNTS: List[int] = [16, 512]
_DEFAULT_N_JOBS = 1
_DEFAULT_ROC_GRID_POINTS = 101

# Plausible ranges picked by inspecting the raw distributions
_DEFAULT_AGE_RANGE = (15.0, 50.0)
_DEFAULT_HEIGHT_RANGE = (150.0, 225.0)
_DEFAULT_REACH_RANGE = (150.0, 230.0)
_DEFAULT_WEIGHT_RANGE = (90.0, 350.0)


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_list(value: Optional[str], default: List[str]) -> List[str]:
    if value is None or value == "":
        return list(default)
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(default)


def _coerce_int_list(value: Optional[str], default: List[int]) -> List[int]:
    items = _coerce_list(value, [str(item) for item in default])
    try:
        return [int(item) for item in items]
    except ValueError:
        return list(default)


def _coerce_range(
    value: Optional[str],
    default: Tuple[float, float],
) -> Tuple[float, float]:
    if value is None or value == "":
        return default
    if isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        parts = [item.strip() for item in str(value).split(",")]
    if len(parts) != 2:
        return default
    try:
        return float(parts[0]), float(parts[1])
    except (TypeError, ValueError):
        return default


def _parse_env_file(path: Path) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = _strip_quotes(value.strip())
    return data


def _load_config_data(path: Path) -> Dict[str, str]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        output = {}
        for key, value in payload.items():
            if isinstance(value, (list, tuple)):
                output[str(key)] = ",".join(str(item) for item in value)
            else:
                output[str(key)] = str(value)
        return output
    return _parse_env_file(path)


@dataclass
class Config:
    data_path: str
    output_dir: str
    seed: int
    folds: int
    sample_per_class: int
    tree_counts: List[int]
    predictors: List[str]
    n_jobs: int = _DEFAULT_N_JOBS
    roc_grid_points: int = _DEFAULT_ROC_GRID_POINTS

    # Inclusive validity ranges
    age_range: Tuple[float, float] = _DEFAULT_AGE_RANGE
    height_range: Tuple[float, float] = _DEFAULT_HEIGHT_RANGE
    reach_range: Tuple[float, float] = _DEFAULT_REACH_RANGE
    weight_range: Tuple[float, float] = _DEFAULT_WEIGHT_RANGE

    def ranges(self) -> Dict[str, Tuple[float, float]]:
        """Validity ranges keyed by attribute base name."""
        return {
            "age": self.age_range,
            "height": self.height_range,
            "reach": self.reach_range,
            "weight": self.weight_range,
        }

    def validate(self) -> None:
        """Reject inconsistent parameters before any computation starts."""
        if self.folds < 2:
            raise ConfigurationError(f"folds must be >= 2, got {self.folds}")
        if self.sample_per_class <= 0:
            raise ConfigurationError(
                f"sample_per_class must be positive, got {self.sample_per_class}"
            )
        if self.folds > self.sample_per_class:
            raise ConfigurationError(
                f"folds ({self.folds}) exceeds sample_per_class ({self.sample_per_class}); "
                "every fold needs at least one bout of each outcome"
            )
        if not self.tree_counts:
            raise ConfigurationError("tree_counts must name at least one configuration")
        bad_counts = [count for count in self.tree_counts if count < 1]
        if bad_counts:
            raise ConfigurationError(f"tree_counts must be >= 1, got {bad_counts}")
        if len(set(self.tree_counts)) != len(self.tree_counts):
            raise ConfigurationError(f"tree_counts must be distinct, got {self.tree_counts}")
        if not self.predictors:
            raise ConfigurationError("predictors must name at least one column")
        if self.roc_grid_points < 2:
            raise ConfigurationError(
                f"roc_grid_points must be >= 2, got {self.roc_grid_points}"
            )
        for name, (low, high) in self.ranges().items():
            if low > high:
                raise ConfigurationError(
                    f"{name}_range lower bound {low} exceeds upper bound {high}"
                )

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            data_path=os.environ.get("BOUTSTATS_DATA_PATH", _DEFAULT_DATA_PATH),
            output_dir=os.environ.get("BOUTSTATS_OUTPUT_DIR", _DEFAULT_OUTPUT_DIR),
            seed=_coerce_int(os.environ.get("BOUTSTATS_SEED"), _DEFAULT_SEED),
            folds=_coerce_int(os.environ.get("BOUTSTATS_FOLDS"), _DEFAULT_FOLDS),
            sample_per_class=_coerce_int(
                os.environ.get("BOUTSTATS_SAMPLE_PER_CLASS"),
                _DEFAULT_SAMPLE_PER_CLASS,
            ),
            tree_counts=_coerce_int_list(
                os.environ.get("BOUTSTATS_TREE_COUNTS"),
                _DEFAULT_TREE_COUNTS,
            ),
            predictors=_coerce_list(
                os.environ.get("BOUTSTATS_PREDICTORS"),
                DEFAULT_PREDICTORS,
            ),
            n_jobs=_coerce_int(os.environ.get("BOUTSTATS_N_JOBS"), _DEFAULT_N_JOBS),
            roc_grid_points=_coerce_int(
                os.environ.get("BOUTSTATS_ROC_GRID_POINTS"),
                _DEFAULT_ROC_GRID_POINTS,
            ),
            age_range=_coerce_range(os.environ.get("BOUTSTATS_AGE_RANGE"), _DEFAULT_AGE_RANGE),
            height_range=_coerce_range(
                os.environ.get("BOUTSTATS_HEIGHT_RANGE"),
                _DEFAULT_HEIGHT_RANGE,
            ),
            reach_range=_coerce_range(
                os.environ.get("BOUTSTATS_REACH_RANGE"),
                _DEFAULT_REACH_RANGE,
            ),
            weight_range=_coerce_range(
                os.environ.get("BOUTSTATS_WEIGHT_RANGE"),
                _DEFAULT_WEIGHT_RANGE,
            ),
        )

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        env_config = cls.from_env()
        if not config_path:
            return env_config

        file_data = _load_config_data(Path(config_path))
        return cls(
            data_path=file_data.get("BOUTSTATS_DATA_PATH", env_config.data_path),
            output_dir=file_data.get("BOUTSTATS_OUTPUT_DIR", env_config.output_dir),
            seed=_coerce_int(file_data.get("BOUTSTATS_SEED"), env_config.seed),
            folds=_coerce_int(file_data.get("BOUTSTATS_FOLDS"), env_config.folds),
            sample_per_class=_coerce_int(
                file_data.get("BOUTSTATS_SAMPLE_PER_CLASS"),
                env_config.sample_per_class,
            ),
            tree_counts=_coerce_int_list(
                file_data.get("BOUTSTATS_TREE_COUNTS"),
                env_config.tree_counts,
            ),
            predictors=_coerce_list(
                file_data.get("BOUTSTATS_PREDICTORS"),
                env_config.predictors,
            ),
            n_jobs=_coerce_int(file_data.get("BOUTSTATS_N_JOBS"), env_config.n_jobs),
            roc_grid_points=_coerce_int(
                file_data.get("BOUTSTATS_ROC_GRID_POINTS"),
                env_config.roc_grid_points,
            ),
            age_range=_coerce_range(file_data.get("BOUTSTATS_AGE_RANGE"), env_config.age_range),
            height_range=_coerce_range(
                file_data.get("BOUTSTATS_HEIGHT_RANGE"),
                env_config.height_range,
            ),
            reach_range=_coerce_range(
                file_data.get("BOUTSTATS_REACH_RANGE"),
                env_config.reach_range,
            ),
            weight_range=_coerce_range(
                file_data.get("BOUTSTATS_WEIGHT_RANGE"),
                env_config.weight_range,
            ),
        )

    def to_dict(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}
