"""Raw input loading."""

from boutstats.ingestion.bouts import load_bouts, read_bout_rows

__all__ = ["load_bouts", "read_bout_rows"]
