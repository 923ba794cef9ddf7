"""
Pytest configuration and shared fixtures for bout analysis tests.
"""

import pytest

from boutstats.ops.metrics import InMemoryMetricsRecorder
from tests.fixtures.bouts import make_bouts, write_bouts_csv


@pytest.fixture
def bouts():
    """Six hundred synthetic bouts with a handful of draws."""
    return make_bouts()


@pytest.fixture
def decided_bouts():
    """Four hundred synthetic bouts without draws."""
    return make_bouts(n=400, seed=11, draw_share=0.0)


@pytest.fixture
def bouts_csv(tmp_path, bouts):
    return write_bouts_csv(bouts, tmp_path / "bouts.csv")


@pytest.fixture
def recorder():
    return InMemoryMetricsRecorder()
