"""Unit tests for logging setup, the metrics recorder and the run manifest."""

import json
import logging

from boutstats.ops.logging import configure_logging
from boutstats.ops.metrics import InMemoryMetricsRecorder
from boutstats.runtime.manifest import RunManifest


def test_recorder_counts_and_times():
    recorder = InMemoryMetricsRecorder()
    recorder.increment("fit.success")
    recorder.increment("fit.success", 2)
    with recorder.timed("fold.fit_ms"):
        pass
    snapshot = recorder.snapshot()

    assert snapshot["counters"] == {"fit.success": 3}
    assert snapshot["timings"]["fold.fit_ms"]["count"] == 1
    assert snapshot["timings"]["fold.fit_ms"]["max_ms"] >= 0.0
    assert snapshot["timings"]["fold.fit_ms"]["total_ms"] >= snapshot["timings"]["fold.fit_ms"]["max_ms"]
    assert recorder.counter("fit.success") == 3
    assert recorder.counter("fit.failures") == 0

    recorder.reset()
    assert recorder.snapshot() == {"counters": {}, "timings": {}}


def test_manifest_serializes():
    manifest = RunManifest(seed=4)
    manifest.row_counts["raw"] = 10
    manifest.fit_failures.append({"fold": 1, "config": "trees_16", "reason": "single class"})
    payload = json.loads(json.dumps(manifest.to_dict()))

    assert payload["seed"] == 4
    assert payload["row_counts"] == {"raw": 10}
    assert payload["fit_failures"][0]["config"] == "trees_16"
    assert len(payload["run_id"]) == 32


def test_configure_logging_writes_run_log(tmp_path, monkeypatch):
    monkeypatch.setenv("BOUTSTATS_LOG_LEVEL", "INFO")
    log_path = configure_logging(run_id="abc123", log_dir=str(tmp_path / "logs"))
    logging.getLogger("boutstats.test").info("fold scored")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "logs" / "run_abc123.log"
    assert "[run_id=abc123] boutstats.test: fold scored" in log_path.read_text(encoding="utf-8")
