from __future__ import annotations

CATEGORY_RESOURCE_UTILIZATION = "Resource Utilization"
CATEGORY_PERFORMANCE_TREND = "Performance Trend"
CATEGORY_PERFORMANCE_IMPROVEMENT = "Performance Improvement"
CATEGORY_ANOMALY_DETECTION = "Anomaly Detection"

# recommended actions keyed by a substring of the metric name, first match wins
TREND_ACTIONS: tuple[tuple[str, str], ...] = (
    ("cpu", "Consider CPU scaling or optimizing CPU-intensive operations"),
    ("memory", "Review memory optimization and check for potential leaks"),
    ("error", "Investigate the source of increasing errors"),
)
DEFAULT_TREND_ACTION = "Monitor this metric for continued growth"
IMPROVEMENT_ACTION = "Continue monitoring to ensure stability"

ANOMALY_ACTIONS: dict[str, str] = {
    "critical": "Immediate investigation required",
    "warning": "Monitor this anomaly closely",
    "info": "Review when convenient",
}
