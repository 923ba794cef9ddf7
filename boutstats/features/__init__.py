"""Cleaning and derived features."""

from boutstats.features.cleaning import filter_ranges, resolve_range_columns
from boutstats.features.pipeline import derive_differences, exclude_draws, exclude_for_question

__all__ = [
    "filter_ranges",
    "resolve_range_columns",
    "derive_differences",
    "exclude_draws",
    "exclude_for_question",
]
