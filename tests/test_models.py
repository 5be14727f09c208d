"""
Test cases for result models, covering immutability, numpy value coercion on serialization and defaults.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import numpy as np
import pytest
from pydantic import ValidationError

from engine.enums import ConfidenceLevel, Severity, TrendDirection
from engine.models import MetricAnomaly, MovingAverageData, RegressionResult, TrendAnalysisResult


def test_moving_average_data_is_frozen(t0):
    ma = MovingAverageData.flat(5.0, t0)
    assert (ma.ma_short, ma.ma_medium, ma.ma_long, ma.ema) == (5.0, 5.0, 5.0, 5.0)
    with pytest.raises(ValidationError):
        ma.ema = 6.0


def test_anomaly_requires_known_severity(t0):
    with pytest.raises(ValidationError):
        MetricAnomaly(
            metric_name="cpu",
            current_value=1.0,
            expected_value=1.0,
            deviation=0.0,
            z_score=0.0,
            severity="severe",
            timestamp=t0,
            description="",
        )


def test_numpy_values_are_coerced(t0):
    anomaly = MetricAnomaly(
        metric_name="cpu",
        current_value=np.float64(97.5),
        expected_value=np.float64(75.0),
        deviation=np.float64(22.5),
        z_score=np.float64(3.0),
        severity=Severity.high,
        timestamp=t0,
        description="Z-Score anomaly in cpu",
    )
    dumped = anomaly.model_dump()
    assert type(dumped["current_value"]) is float
    assert dumped["severity"] == "high"


def test_regression_result_defaults(t0):
    result = RegressionResult(timestamp=t0)
    assert (result.slope, result.intercept, result.r_squared, result.sample_count) == (0.0, 0.0, 0.0, 0)
    assert result.direction == TrendDirection.stable
    assert result.confidence == ConfidenceLevel.very_low


def test_analysis_result_defaults_are_independent(t0):
    first = TrendAnalysisResult(timestamp=t0)
    second = TrendAnalysisResult(timestamp=t0)
    assert first.anomalies == [] and first.correlations == {}
    assert first.anomalies is not second.anomalies
    assert first.model_dump_json()
