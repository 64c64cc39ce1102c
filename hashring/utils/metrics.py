# hashring/utils/metrics.py
import time
import threading
from collections import defaultdict

# Implementasi sederhana untuk metrik, dipakai bersama oleh semua ring dalam proses
metrics_data = defaultdict(lambda: {"count": 0, "total_time": 0.0, "value": 0})
_metrics_lock = threading.Lock()

def record_latency(metric_name, start_time):
    """Mencatat latensi untuk sebuah operasi."""
    duration = time.time() - start_time
    with _metrics_lock:
        metrics_data[metric_name]["count"] += 1
        metrics_data[metric_name]["total_time"] += duration

def increment_counter(metric_name, value=1):
    """Menambah nilai sebuah counter."""
    with _metrics_lock:
        metrics_data[metric_name]["value"] += value

def reset_metrics():
    """Menghapus semua metrik yang terkumpul."""
    with _metrics_lock:
        metrics_data.clear()

def get_metrics():
    """Mendapatkan metrik yang terkumpul."""
    report = {}
    with _metrics_lock:
        for name, data in metrics_data.items():
            if data["count"] > 0: # Ini metrik latensi
                avg_latency = data["total_time"] / data["count"]
                report[name] = {
                    "requests_count": data["count"],
                    "average_latency_ms": avg_latency * 1000
                }
            elif data["value"] > 0: # Ini metrik counter
                report[name] = {"count": data["value"]}

        # Hitung rasio key yang dipindah terhadap key yang pernah di-assign
        assigned = metrics_data["ring_keys_assigned"]["value"] if "ring_keys_assigned" in metrics_data else 0
        reassigned = metrics_data["ring_keys_reassigned"]["value"] if "ring_keys_reassigned" in metrics_data else 0

    if assigned > 0:
        report["reassignment_ratio_percent"] = round((reassigned / assigned) * 100, 2)
    else:
        report["reassignment_ratio_percent"] = 0

    return report
