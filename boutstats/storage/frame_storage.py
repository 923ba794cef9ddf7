"""File-backed storage for the cleaned dataset and run tables."""

from pathlib import Path
from typing import Dict, List, Union
import json

import pandas as pd

from boutstats.normalization.schema import coerce_types
from boutstats.reporting.summary_output import to_json_ready


class FrameStorage:
    """Cleaned bout frames as CSV and per-run result tables as JSON records."""

    def __init__(self, base_dir: str) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str, suffix: str) -> Path:
        return self._base_dir / f"{name}{suffix}"

    def write_frame(self, name: str, frame: pd.DataFrame) -> str:
        path = self._path(name, ".csv")
        frame.to_csv(path, index=False)
        return str(path)

    def read_frame(self, name: str) -> pd.DataFrame:
        """Reload a stored bout frame, re-validating its schema."""
        path = self._path(name, ".csv")
        if not path.exists():
            raise FileNotFoundError(f"No stored frame named {name!r} in {self._base_dir}")
        frame = coerce_types(pd.read_csv(path, dtype=object, keep_default_na=False))
        for column in [col for col in frame.columns if col.endswith("_diff")]:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
        return frame

    def write_table(self, name: str, table: Union[pd.DataFrame, List[Dict]]) -> str:
        """Store a result table as JSON records; missing values are written as null."""
        records = table.to_dict(orient="records") if isinstance(table, pd.DataFrame) else list(table)
        path = self._path(name, ".json")
        path.write_text(
            json.dumps(to_json_ready(records), indent=2, sort_keys=True, allow_nan=False),
            encoding="utf-8",
        )
        return str(path)

    def read_table(self, name: str) -> pd.DataFrame:
        """Stored table as a frame; an unknown name gives an empty frame."""
        path = self._path(name, ".json")
        if not path.exists():
            return pd.DataFrame()
        return pd.DataFrame(json.loads(path.read_text(encoding="utf-8")))
