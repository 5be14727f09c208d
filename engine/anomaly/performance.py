"""
Lightweight single-method performance anomaly check, scoring each metric's deviation from its medium moving average against a configurable z-score staircase and reporting at most one anomaly per metric.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Dict, List, Tuple

from config import settings
from engine.dedup import deduplicate_by_metric
from engine.enums import Severity
from engine.models import MetricAnomaly, MovingAverageData


def detect_performance_anomalies(
    metrics: Dict[str, float],
    moving_averages: Dict[str, MovingAverageData],
    levels: List[Tuple[float, str]] | None = None,
    std_fraction: float | None = None,
) -> List[MetricAnomaly]:
    if levels is None:
        levels = settings.performance_anomaly_levels
    if std_fraction is None:
        std_fraction = settings.anomaly_std_fallback_fraction

    candidates: List[MetricAnomaly] = []
    for name, raw in metrics.items():
        ma = moving_averages.get(name)
        if ma is None:
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        expected = ma.ma_medium
        std = abs(expected) * std_fraction
        if not math.isfinite(value) or std == 0 or not math.isfinite(std):
            continue

        deviation = value - expected
        z = abs(deviation) / std
        if not (math.isfinite(deviation) and math.isfinite(z)):
            continue
        for cutoff, label in levels:
            if z < cutoff:
                continue
            candidates.append(
                MetricAnomaly(
                    metric_name=name,
                    current_value=value,
                    expected_value=expected,
                    deviation=deviation,
                    z_score=z,
                    severity=Severity(label),
                    timestamp=ma.timestamp,
                    description=f"Performance anomaly in {name}: z-score {z:.2f} from {expected:.2f}",
                )
            )

    return deduplicate_by_metric(candidates)
