"""
Narrow interfaces for the trend updaters so the analyzer can be composed from substitute implementations.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Protocol, runtime_checkable

from engine.enums import TrendDirection
from engine.models import MetricAnomaly, MovingAverageData, RegressionResult, SeasonalityPattern


@runtime_checkable
class MovingAverageSource(Protocol):
    def update_moving_averages(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, MovingAverageData]: ...


@runtime_checkable
class TrendDirectionSource(Protocol):
    def update_trend_directions(
        self, metrics: Dict[str, float], moving_averages: Dict[str, MovingAverageData]
    ) -> Dict[str, TrendDirection]: ...


@runtime_checkable
class TrendVelocitySource(Protocol):
    def update_trend_velocities(self, metrics: Dict[str, float], timestamp: datetime) -> Dict[str, float]: ...


@runtime_checkable
class SeasonalitySource(Protocol):
    def update_seasonality_patterns(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, SeasonalityPattern]: ...


@runtime_checkable
class RegressionSource(Protocol):
    def update_regression_results(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, RegressionResult]: ...


@runtime_checkable
class CorrelationSource(Protocol):
    def update_correlations(self, metrics: Dict[str, float]) -> Dict[str, List[str]]: ...


@runtime_checkable
class AnomalySource(Protocol):
    def update_anomalies(
        self, metrics: Dict[str, float], moving_averages: Dict[str, MovingAverageData]
    ) -> List[MetricAnomaly]: ...
