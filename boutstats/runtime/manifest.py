"""Run manifest for reproducibility."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import uuid


@dataclass
class RunManifest:
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=datetime.utcnow)
    git_sha: Optional[str] = None
    config_hash: Optional[str] = None
    seed: Optional[int] = None
    row_counts: Dict[str, int] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)
    fit_failures: List[Dict] = field(default_factory=list)
    metrics: Dict[str, Dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "git_sha": self.git_sha,
            "config_hash": self.config_hash,
            "seed": self.seed,
            "row_counts": dict(self.row_counts),
            "outputs": dict(self.outputs),
            "fit_failures": list(self.fit_failures),
            "metrics": dict(self.metrics),
        }
