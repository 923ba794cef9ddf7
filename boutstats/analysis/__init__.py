"""Descriptive statistics, hypothesis tests and the reach/height regression."""

from boutstats.analysis.hypotheses import AdvantageTest, advantage_table, advantage_test
from boutstats.analysis.regression import RegressionResult, fit_linear
from boutstats.analysis.summary import describe_attributes, outcome_distribution

__all__ = [
    "AdvantageTest",
    "advantage_table",
    "advantage_test",
    "RegressionResult",
    "fit_linear",
    "describe_attributes",
    "outcome_distribution",
]
