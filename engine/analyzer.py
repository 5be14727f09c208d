"""
Trend analysis orchestration: derives threshold insights from raw readings, runs every trend updater in one fault-isolated pass and merges their output into a single result, plus lighter entry points for moving averages and single-method anomaly checks.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List

from config import Settings, settings
from engine.anomaly.performance import detect_performance_anomalies
from engine.dedup import deduplicate_by_metric
from engine.insights import generate_basic_insights, generate_trend_insights
from engine.interfaces import (
    AnomalySource,
    CorrelationSource,
    MovingAverageSource,
    RegressionSource,
    SeasonalitySource,
    TrendDirectionSource,
    TrendVelocitySource,
)
from engine.models import MetricAnomaly, MovingAverageData, TrendAnalysisResult
from engine.safelog import emit

log = logging.getLogger(__name__)


class TrendAnalyzer:
    def __init__(
        self,
        moving_average_updater: MovingAverageSource,
        trend_direction_updater: TrendDirectionSource,
        trend_velocity_updater: TrendVelocitySource,
        seasonality_updater: SeasonalitySource,
        regression_updater: RegressionSource,
        correlation_updater: CorrelationSource,
        anomaly_updater: AnomalySource,
        config: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._moving_averages = moving_average_updater
        self._directions = trend_direction_updater
        self._velocities = trend_velocity_updater
        self._seasonality = seasonality_updater
        self._regression = regression_updater
        self._correlations = correlation_updater
        self._anomalies = anomaly_updater
        self._config = config if config is not None else settings
        self._log = logger or log

    def analyze_metric_trends(
        self, metrics: Dict[str, float], timestamp: datetime | None = None
    ) -> TrendAnalysisResult:
        """Analyze one batch of metric readings.

        Basic utilization insights are always computed from the raw values.
        The updaters then run as a single unit: if any of them raises, every
        advanced field of the result is left empty and only the basic insights
        are returned.
        """
        if metrics is None:
            raise ValueError("metrics must not be None")
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        insights = generate_basic_insights(metrics, self._config)
        stage = "moving averages"
        try:
            moving_averages = self._moving_averages.update_moving_averages(metrics, timestamp)
            stage = "trend directions"
            directions = self._directions.update_trend_directions(metrics, moving_averages)
            stage = "trend velocities"
            velocities = self._velocities.update_trend_velocities(metrics, timestamp)
            stage = "seasonality"
            seasonality = self._seasonality.update_seasonality_patterns(metrics, timestamp)
            stage = "regression"
            regression = self._regression.update_regression_results(metrics, timestamp)
            stage = "correlations"
            correlations = self._correlations.update_correlations(metrics)
            stage = "anomalies"
            anomalies = deduplicate_by_metric(self._anomalies.update_anomalies(metrics, moving_averages))
            stage = "insights"
            derived = generate_trend_insights(directions, velocities, anomalies, metrics, self._config)
        except Exception as exc:
            emit(self._log, logging.ERROR, "trend analysis failed during %s: %s", stage, exc, exc_info=True)
            return TrendAnalysisResult(timestamp=timestamp, insights=insights)

        return TrendAnalysisResult(
            timestamp=timestamp,
            moving_averages=moving_averages,
            trend_directions=directions,
            trend_velocities=velocities,
            seasonality_patterns=seasonality,
            regression_results=regression,
            correlations=correlations,
            anomalies=anomalies,
            insights=insights + derived,
        )

    def detect_performance_anomalies(
        self,
        metrics: Dict[str, float],
        moving_averages: Dict[str, MovingAverageData],
    ) -> List[MetricAnomaly]:
        return detect_performance_anomalies(
            metrics,
            moving_averages,
            levels=self._config.performance_anomaly_levels,
            std_fraction=self._config.anomaly_std_fallback_fraction,
        )

    def calculate_moving_averages(
        self, metrics: Dict[str, float], timestamp: datetime | None = None
    ) -> Dict[str, MovingAverageData]:
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        return self._moving_averages.update_moving_averages(metrics, timestamp)
