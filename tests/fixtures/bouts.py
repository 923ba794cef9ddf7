"""Synthetic bout tables for tests."""

from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd

from boutstats.constants import JUDGE_COLUMNS, REQUIRED_COLUMNS


VALID_ROW: Dict[str, str] = {
    "age_A": "25", "age_B": "30",
    "height_A": "180", "height_B": "175",
    "reach_A": "183", "reach_B": "178",
    "weight_A": "160", "weight_B": "161",
    "won_A": "20", "won_B": "15",
    "lost_A": "2", "lost_B": "4",
    "drawn_A": "1", "drawn_B": "0",
    "kos_A": "12", "kos_B": "9",
    "result": "win_A",
}


def make_bouts(n: int = 600, seed: int = 7, draw_share: float = 0.05) -> pd.DataFrame:
    """Synthetic bouts where record and reach advantages drive the outcome."""
    rng = np.random.default_rng(seed)
    frame = pd.DataFrame({
        "age_A": rng.integers(18, 40, n).astype(float),
        "age_B": rng.integers(18, 40, n).astype(float),
        "height_A": rng.normal(178, 7, n).round(),
        "height_B": rng.normal(178, 7, n).round(),
        "weight_A": rng.normal(160, 20, n).round(),
    })
    frame["reach_A"] = (frame["height_A"] + rng.normal(2, 4, n)).round()
    frame["reach_B"] = (frame["height_B"] + rng.normal(2, 4, n)).round()
    frame["weight_B"] = (frame["weight_A"] + rng.normal(0, 3, n)).round()
    for side in ("A", "B"):
        won = rng.integers(0, 40, n)
        frame[f"won_{side}"] = won.astype(float)
        frame[f"lost_{side}"] = rng.integers(0, 15, n).astype(float)
        frame[f"drawn_{side}"] = rng.integers(0, 4, n).astype(float)
        frame[f"kos_{side}"] = np.floor(won * rng.uniform(0, 1, n))

    score = (
        0.15 * (frame["won_A"] - frame["won_B"])
        - 0.2 * (frame["lost_A"] - frame["lost_B"])
        + 0.1 * (frame["reach_A"] - frame["reach_B"])
        + rng.normal(0, 1.0, n)
    )
    result = np.where(score > 0, "win_A", "win_B").astype(object)
    result[rng.uniform(0, 1, n) < draw_share] = "draw"
    frame["result"] = result
    return frame[REQUIRED_COLUMNS]


def write_bouts_csv(frame: pd.DataFrame, path: Path) -> Path:
    output = frame.copy()
    for column in JUDGE_COLUMNS:
        output[column] = ""
    output.to_csv(path, index=False)
    return path


def render_row(values: Dict[str, str]) -> str:
    return ",".join(values[column] for column in REQUIRED_COLUMNS)


def render_csv(rows, header=None) -> str:
    header = header or REQUIRED_COLUMNS
    lines = [",".join(header)]
    lines.extend(rows)
    return "\n".join(lines) + "\n"
