"""
Insight generation rules turning raw metric readings, trend directions, velocities and anomalies into operator-facing insights with a category, severity and recommended action.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Dict, List

from config import Settings, settings
from engine.constants import (
    ANOMALY_ACTIONS,
    CATEGORY_ANOMALY_DETECTION,
    CATEGORY_PERFORMANCE_IMPROVEMENT,
    CATEGORY_PERFORMANCE_TREND,
    CATEGORY_RESOURCE_UTILIZATION,
    DEFAULT_TREND_ACTION,
    IMPROVEMENT_ACTION,
    TREND_ACTIONS,
)
from engine.enums import InsightSeverity, TrendDirection
from engine.models import MetricAnomaly, TrendInsight


def _is_resource_metric(name: str, keywords: List[str]) -> bool:
    lowered = name.lower()
    return any(k.lower() in lowered for k in keywords)


def _trend_action(name: str) -> str:
    lowered = name.lower()
    for needle, action in TREND_ACTIONS:
        if needle in lowered:
            return action
    return DEFAULT_TREND_ACTION


def _current_suffix(name: str, current_metrics: Dict[str, float]) -> str:
    value = current_metrics.get(name)
    if value is None:
        return ""
    return f" (current value: {float(value):.2f})"


def generate_basic_insights(metrics: Dict[str, float], config: Settings | None = None) -> List[TrendInsight]:
    cfg = config if config is not None else settings
    insights: List[TrendInsight] = []
    for name, raw in metrics.items():
        if not _is_resource_metric(name, cfg.insight_resource_keywords):
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(value):
            continue

        if value > cfg.insight_critical_utilization:
            insights.append(TrendInsight(
                category=CATEGORY_RESOURCE_UTILIZATION,
                severity=InsightSeverity.critical,
                message=f"{name} at Critical utilization level: {value:.1f}%",
                recommended_action=f"Scale out or shed load immediately to relieve {name}",
            ))
        elif value > cfg.insight_warning_utilization:
            insights.append(TrendInsight(
                category=CATEGORY_RESOURCE_UTILIZATION,
                severity=InsightSeverity.warning,
                message=f"{name} at High utilization level: {value:.1f}%",
                recommended_action=f"Plan capacity for {name} before it reaches critical levels",
            ))
    return insights


def generate_trend_insights(
    trend_directions: Dict[str, TrendDirection],
    trend_velocities: Dict[str, float],
    anomalies: List[MetricAnomaly],
    current_metrics: Dict[str, float],
    config: Settings | None = None,
) -> List[TrendInsight]:
    cfg = config if config is not None else settings
    insights: List[TrendInsight] = []

    for name, direction in trend_directions.items():
        velocity = trend_velocities.get(name, 0.0)
        if not math.isfinite(velocity) or abs(velocity) <= cfg.trend_insight_velocity:
            continue
        if direction == TrendDirection.increasing:
            severity = (
                InsightSeverity.critical
                if abs(velocity) > cfg.trend_insight_velocity_critical
                else InsightSeverity.warning
            )
            insights.append(TrendInsight(
                category=CATEGORY_PERFORMANCE_TREND,
                severity=severity,
                message=f"Metric {name} is trending upward with velocity {velocity:.3f}" + _current_suffix(name, current_metrics),
                recommended_action=_trend_action(name),
            ))
        elif direction == TrendDirection.decreasing:
            insights.append(TrendInsight(
                category=CATEGORY_PERFORMANCE_IMPROVEMENT,
                severity=InsightSeverity.info,
                message=f"Metric {name} is improving with downward trend (velocity: {velocity:.3f})",
                recommended_action=IMPROVEMENT_ACTION,
            ))

    for anomaly in anomalies:
        severity = InsightSeverity.from_anomaly(anomaly.severity)
        insights.append(TrendInsight(
            category=CATEGORY_ANOMALY_DETECTION,
            severity=severity,
            message=f"Anomaly detected in {anomaly.metric_name}: {anomaly.description}",
            recommended_action=ANOMALY_ACTIONS[severity.value],
        ))

    return insights
