"""Timing, throughput and resource metrics recorded by each job."""

import time
from contextlib import contextmanager
from typing import Dict, Union

import psutil

Metrics = Dict[str, Union[float, int, str]]


@contextmanager
def stage_timer(metrics: Metrics, stage: str):
    """Record the wall time of a block as `<stage>_time_seconds`."""
    start = time.time()
    try:
        yield
    finally:
        metrics[f"{stage}_time_seconds"] = time.time() - start


def resource_snapshot() -> Dict[str, float]:
    return {
        "cpu_usage_percent": psutil.cpu_percent(interval=None),
        "memory_usage_percent": psutil.virtual_memory().percent,
    }


def finalize_metrics(metrics: Metrics, start_time: float) -> Metrics:
    """Add total time, throughput, latency and resource usage to `metrics`."""
    metrics["total_execution_time_seconds"] = time.time() - start_time
    total = metrics.get("total_records", 0)
    elapsed = metrics["total_execution_time_seconds"]
    metrics["throughput_records_per_second"] = total / elapsed if elapsed > 0 else 0
    metrics["latency_per_record_ms"] = (elapsed / total * 1000) if total > 0 else 0
    metrics.update(resource_snapshot())
    return metrics
