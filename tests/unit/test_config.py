"""Unit tests for run configuration."""

import json
import os

import pytest

from boutstats.config import Config
from boutstats.constants import DEFAULT_PREDICTORS
from boutstats.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BOUTSTATS_"):
            monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = Config.from_env()

    assert config.seed == 1
    assert config.folds == 10
    assert config.sample_per_class == 1000
    assert config.tree_counts == [16, 512]
    assert config.predictors == DEFAULT_PREDICTORS
    assert config.ranges()["reach"] == (150.0, 230.0)
    config.validate()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BOUTSTATS_SEED", "42")
    monkeypatch.setenv("BOUTSTATS_TREE_COUNTS", "8, 64")
    monkeypatch.setenv("BOUTSTATS_AGE_RANGE", "18,40")
    monkeypatch.setenv("BOUTSTATS_PREDICTORS", "age_A,age_B")
    config = Config.from_env()

    assert config.seed == 42
    assert config.tree_counts == [8, 64]
    assert config.age_range == (18.0, 40.0)
    assert config.predictors == ["age_A", "age_B"]


def test_unparseable_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("BOUTSTATS_FOLDS", "ten")
    monkeypatch.setenv("BOUTSTATS_HEIGHT_RANGE", "150")
    config = Config.from_env()

    assert config.folds == 10
    assert config.height_range == (150.0, 225.0)


def test_json_file_overrides_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("BOUTSTATS_SEED", "5")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"BOUTSTATS_FOLDS": 5, "BOUTSTATS_TREE_COUNTS": [4, 8]}), encoding="utf-8")
    config = Config.load(str(path))

    assert config.seed == 5
    assert config.folds == 5
    assert config.tree_counts == [4, 8]


def test_env_file(tmp_path):
    path = tmp_path / "run.env"
    path.write_text(
        "# comment\nBOUTSTATS_SAMPLE_PER_CLASS=250\nBOUTSTATS_OUTPUT_DIR='out dir'\n",
        encoding="utf-8",
    )
    config = Config.load(str(path))

    assert config.sample_per_class == 250
    assert config.output_dir == "out dir"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(str(tmp_path / "absent.json"))


@pytest.mark.parametrize(
    "override",
    [
        {"folds": 1},
        {"sample_per_class": 0},
        {"tree_counts": []},
        {"tree_counts": [16, 16]},
        {"age_range": (50.0, 15.0)},
        {"predictors": []},
        {"folds": 8, "sample_per_class": 5},
    ],
)
def test_validate_rejects_bad_values(override):
    config = Config.from_env()
    for key, value in override.items():
        setattr(config, key, value)

    with pytest.raises(ConfigurationError):
        config.validate()
