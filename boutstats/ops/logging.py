"""Logging setup."""

from pathlib import Path
from typing import List, Optional
import logging
import os


def configure_logging(run_id: Optional[str] = None, log_dir: Optional[str] = None) -> Optional[Path]:
    """Configure run logging; with ``log_dir`` also write ``run_<run_id>.log`` there.

    Library warnings (sklearn, scipy) are routed through ``py.warnings`` so
    they land in the same log as the pipeline messages.
    """
    level_name = os.environ.get("BOUTSTATS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    run_prefix = f"[run_id={run_id}] " if run_id else ""
    fmt = "%(asctime)s %(levelname)s " + run_prefix + "%(name)s: %(message)s"

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_path = None
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_path = Path(log_dir) / f"run_{run_id or 'adhoc'}.log"
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)
    logging.captureWarnings(True)
    return log_path
