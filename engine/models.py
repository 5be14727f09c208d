"""
Result models produced by the trend analysis engine and consumed read-only by strategy selection and monitoring surfaces.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer

from engine.enums import (
    ConfidenceLevel,
    DailyPattern,
    HourlyPattern,
    InsightSeverity,
    Severity,
    TrendDirection,
)


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    model_config = ConfigDict(frozen=True)

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class MovingAverageData(NpModel):

    current_value: float
    ma_short: float
    ma_medium: float
    ma_long: float
    ema: float
    timestamp: datetime

    @classmethod
    def flat(cls, value: float, timestamp: datetime) -> MovingAverageData:
        return cls(
            current_value=value,
            ma_short=value,
            ma_medium=value,
            ma_long=value,
            ema=value,
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class SeasonalBucketKey:
    hour: int
    daily_pattern: DailyPattern


@dataclass(frozen=True)
class SeasonalStatistics:
    mean: float
    std_dev: float
    sample_count: int


class SeasonalityPattern(NpModel):

    metric_name: str
    hourly_pattern: HourlyPattern
    daily_pattern: DailyPattern
    expected_multiplier: float
    actual_value: float
    matches_seasonality: bool
    timestamp: datetime


class RegressionResult(NpModel):

    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = 0.0
    sample_count: int = 0
    direction: TrendDirection = TrendDirection.stable
    confidence: ConfidenceLevel = ConfidenceLevel.very_low
    timestamp: datetime


class MetricAnomaly(NpModel):

    metric_name: str
    current_value: float
    expected_value: float
    deviation: float
    z_score: float
    severity: Severity
    timestamp: datetime
    description: str


class TrendInsight(NpModel):

    category: str
    severity: InsightSeverity
    message: str
    recommended_action: str


class TrendAnalysisResult(NpModel):

    timestamp: datetime
    moving_averages: Dict[str, MovingAverageData] = Field(default_factory=dict)
    trend_directions: Dict[str, TrendDirection] = Field(default_factory=dict)
    trend_velocities: Dict[str, float] = Field(default_factory=dict)
    seasonality_patterns: Dict[str, SeasonalityPattern] = Field(default_factory=dict)
    regression_results: Dict[str, RegressionResult] = Field(default_factory=dict)
    correlations: Dict[str, List[str]] = Field(default_factory=dict)
    anomalies: List[MetricAnomaly] = Field(default_factory=list)
    insights: List[TrendInsight] = Field(default_factory=list)
