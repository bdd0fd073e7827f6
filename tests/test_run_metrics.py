import time

from run_metrics import finalize_metrics, stage_timer


def test_stage_timer_records_duration():
    metrics = {}
    with stage_timer(metrics, "read"):
        pass
    assert metrics["read_time_seconds"] >= 0


def test_finalize_metrics():
    metrics = finalize_metrics({"total_records": 100}, time.time() - 2)
    assert metrics["total_execution_time_seconds"] >= 2
    assert 0 < metrics["throughput_records_per_second"] <= 50
    assert metrics["latency_per_record_ms"] >= 20
    assert "cpu_usage_percent" in metrics
    assert "memory_usage_percent" in metrics


def test_finalize_metrics_without_records():
    metrics = finalize_metrics({}, time.time())
    assert metrics["latency_per_record_ms"] == 0
