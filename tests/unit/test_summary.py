"""Unit tests for descriptive summaries."""

import pandas as pd
import pytest

from boutstats.analysis.summary import describe_attributes, outcome_distribution


def test_describe_attributes_covers_both_sides(bouts):
    table = describe_attributes(bouts)

    assert len(table) == 8
    assert set(table["side"]) == {"A", "B"}
    row = table.loc[(table["attribute"] == "height") & (table["side"] == "B")].iloc[0]
    assert row["count"] == len(bouts)
    assert row["mean"] == pytest.approx(bouts["height_B"].mean())
    assert row["min"] <= row["q25"] <= row["median"] <= row["q75"] <= row["max"]


def test_describe_attributes_skips_missing_columns():
    frame = pd.DataFrame({"age_A": [20.0, 30.0], "age_B": [25.0, None]})
    table = describe_attributes(frame, attributes=["age", "reach"])

    assert list(table["attribute"]) == ["age", "age"]
    assert list(table["count"]) == [2, 1]


def test_outcome_distribution_lists_every_outcome():
    frame = pd.DataFrame({"result": ["win_A", "win_A", "win_B", None]})
    table = outcome_distribution(frame)

    assert list(table["outcome"]) == ["win_A", "win_B", "draw"]
    assert list(table["count"]) == [2, 1, 0]
    assert table["proportion"].sum() == pytest.approx(1.0)
