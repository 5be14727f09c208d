"""
Test cases for the trend analyzer orchestration, covering merged results, deduplicated anomalies, derived insights, failure isolation with substitute updaters and the lightweight entry points.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import logging
import math
import sys
from datetime import timedelta

import pytest

from engine.analyzer import TrendAnalyzer
from engine.enums import InsightSeverity, Severity, TrendDirection
from engine.interfaces import AnomalySource, MovingAverageSource
from engine.models import TrendAnalysisResult
from engine.registry import build_analyzer


class _Raising:
    def __getattr__(self, name):
        if name.startswith("update_"):
            def _fail(*args, **kwargs):
                raise RuntimeError(f"{name} unavailable")
            return _fail
        raise AttributeError(name)


def _all_raising():
    return TrendAnalyzer(*[_Raising() for _ in range(7)])


def test_empty_batch_yields_empty_result(t0):
    result = build_analyzer().analyze_metric_trends({}, t0)
    assert isinstance(result, TrendAnalysisResult)
    assert result.timestamp == t0
    assert result.moving_averages == {}
    assert result.anomalies == []
    assert result.insights == []


def test_missing_metrics_rejected():
    with pytest.raises(ValueError):
        build_analyzer().analyze_metric_trends(None)


def test_full_pass_populates_every_view(t0):
    analyzer = build_analyzer()
    metrics = {"cpu": 50.0, "memory": 40.0}
    result = analyzer.analyze_metric_trends(metrics, t0)
    assert set(result.moving_averages) == {"cpu", "memory"}
    assert result.trend_directions == {"cpu": TrendDirection.stable, "memory": TrendDirection.stable}
    assert result.trend_velocities == {"cpu": 0.0, "memory": 0.0}
    assert set(result.seasonality_patterns) == {"cpu", "memory"}
    assert set(result.regression_results) == {"cpu", "memory"}
    assert result.correlations == {}
    assert result.anomalies == []
    assert result.insights == []


def test_default_timestamp_is_filled_in():
    result = build_analyzer().analyze_metric_trends({"cpu": 10.0})
    assert result.timestamp.tzinfo is not None
    assert result.moving_averages["cpu"].timestamp == result.timestamp


def test_basic_insights_alongside_advanced_results(t0):
    result = build_analyzer().analyze_metric_trends({"cpu": 95.0, "disk": 70.0}, t0)
    assert [(i.category, i.severity) for i in result.insights] == [
        ("Resource Utilization", InsightSeverity.critical)
    ]
    assert "cpu" in result.insights[0].message


def test_rising_metric_produces_trend_and_anomaly_insights(t0):
    analyzer = build_analyzer()
    for i in range(20):
        analyzer.analyze_metric_trends({"cpu": 50.0}, t0 + timedelta(minutes=i))
    result = analyzer.analyze_metric_trends({"cpu": 85.0}, t0 + timedelta(minutes=20))

    assert result.trend_directions["cpu"] == TrendDirection.increasing
    assert result.trend_velocities["cpu"] > 0.5
    categories = {i.category for i in result.insights}
    assert {"Resource Utilization", "Performance Trend", "Anomaly Detection"} <= categories

    # several detectors fire for this reading but the result keeps one per metric
    assert len(result.anomalies) == 1
    assert result.anomalies[0].metric_name == "cpu"
    assert result.anomalies[0].severity == Severity.high
    assert "Z-Score" in result.anomalies[0].description


def test_result_anomalies_are_deduplicated_per_metric(t0):
    analyzer = build_analyzer()
    for i in range(5):
        analyzer.analyze_metric_trends({"cpu": 60.0, "memory": 60.0, "disk": 70.0}, t0 + timedelta(minutes=i))
    result = analyzer.analyze_metric_trends({"cpu": 97.0, "memory": 94.0, "disk": 70.0}, t0 + timedelta(minutes=5))
    names = [a.metric_name for a in result.anomalies]
    assert sorted(names) == ["cpu", "memory"]


def test_all_updaters_failing_keeps_basic_insights(t0, caplog):
    analyzer = _all_raising()
    with caplog.at_level(logging.ERROR, logger="engine.analyzer"):
        result = analyzer.analyze_metric_trends({"cpu": 85.0}, t0)
    assert len(result.insights) == 1
    assert result.insights[0].severity == InsightSeverity.warning
    assert "cpu" in result.insights[0].message
    for field in (
        result.moving_averages,
        result.trend_directions,
        result.trend_velocities,
        result.seasonality_patterns,
        result.regression_results,
        result.correlations,
    ):
        assert field == {}
    assert result.anomalies == []
    assert "moving averages" in caplog.text


def test_single_failing_updater_empties_every_advanced_field(t0, caplog):
    registry_analyzer = build_analyzer()
    parts = [
        registry_analyzer._moving_averages,
        registry_analyzer._directions,
        registry_analyzer._velocities,
        registry_analyzer._seasonality,
        _Raising(),
        registry_analyzer._correlations,
        registry_analyzer._anomalies,
    ]
    analyzer = TrendAnalyzer(*parts)
    with caplog.at_level(logging.ERROR, logger="engine.analyzer"):
        result = analyzer.analyze_metric_trends({"cpu": 95.0, "latency": 200.0}, t0)
    assert result.moving_averages == {}
    assert result.seasonality_patterns == {}
    assert [i.severity for i in result.insights] == [InsightSeverity.critical]
    assert "regression" in caplog.text


def test_injected_logger_receives_errors(t0):
    records = []

    class Capture(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("tests.analyzer.injected")
    logger.addHandler(Capture())
    logger.propagate = False
    analyzer = TrendAnalyzer(*[_Raising() for _ in range(7)], logger=logger)
    analyzer.analyze_metric_trends({"cpu": 10.0}, t0)
    assert [r.levelno for r in records] == [logging.ERROR]


def test_substitute_updaters_are_accepted(t0, ma_for):
    class FixedAverages:
        def update_moving_averages(self, metrics, timestamp):
            return {name: ma_for(50.0, current=v, when=timestamp) for name, v in metrics.items()}

    class NoAnomalies:
        def update_anomalies(self, metrics, moving_averages):
            return []

    assert isinstance(FixedAverages(), MovingAverageSource)
    assert isinstance(NoAnomalies(), AnomalySource)

    base = build_analyzer()
    analyzer = TrendAnalyzer(
        FixedAverages(),
        base._directions,
        base._velocities,
        base._seasonality,
        base._regression,
        base._correlations,
        NoAnomalies(),
    )
    result = analyzer.analyze_metric_trends({"cpu": 99.0}, t0)
    assert result.moving_averages["cpu"].ma_medium == 50.0
    assert result.anomalies == []
    assert analyzer.calculate_moving_averages({"x": 1.0}, t0)["x"].ma_medium == 50.0


def test_detect_performance_anomalies_entry_point(ma_for):
    analyzer = build_analyzer()
    result = analyzer.detect_performance_anomalies({"cpu": 100.0}, {"cpu": ma_for(50.0)})
    assert len(result) == 1
    assert result[0].deviation == pytest.approx(50.0)
    assert result[0].severity == Severity.high


def test_detect_performance_anomalies_uses_analyzer_config(cfg, ma_for):
    cfg.performance_anomaly_levels = [(20.0, "critical")]
    analyzer = build_analyzer(cfg)
    assert analyzer.detect_performance_anomalies({"cpu": 100.0}, {"cpu": ma_for(50.0)}) == []


def test_calculate_moving_averages_delegates(t0):
    analyzer = build_analyzer()
    analyzer.calculate_moving_averages({"cpu": 10.0}, t0)
    result = analyzer.calculate_moving_averages({"cpu": 20.0}, t0 + timedelta(seconds=1))
    assert result["cpu"].ma_short == pytest.approx(15.0)
    assert result["cpu"].ema == pytest.approx(13.0)


def test_result_serializes_to_builtins(t0):
    result = build_analyzer().analyze_metric_trends({"cpu": 95.0}, t0)
    dumped = result.model_dump()
    assert dumped["moving_averages"]["cpu"]["ma_short"] == 95.0
    assert dumped["insights"][0]["severity"] == InsightSeverity.critical


def test_extreme_values_never_surface_as_non_finite(t0):
    analyzer = build_analyzer()
    batch = {
        "cpu": sys.float_info.max,
        "memory": -sys.float_info.max,
        "disk": math.inf,
        "net": -math.inf,
        "latency": math.nan,
        "io": 1.0,
    }
    for i in range(3):
        result = analyzer.analyze_metric_trends(batch, t0 + timedelta(minutes=i))

    assert set(result.moving_averages) == {"cpu", "memory", "io"}
    for ma in result.moving_averages.values():
        assert all(math.isfinite(v) for v in (ma.ma_short, ma.ma_medium, ma.ma_long, ma.ema))
    assert all(math.isfinite(v) for v in result.trend_velocities.values())
    for reg in result.regression_results.values():
        assert all(math.isfinite(v) for v in (reg.slope, reg.intercept, reg.r_squared))
    for anomaly in result.anomalies:
        assert all(math.isfinite(v) for v in (anomaly.deviation, anomaly.z_score, anomaly.expected_value))
    assert analyzer.detect_performance_anomalies(batch, result.moving_averages) == []


def test_failing_logger_still_returns_basic_insights(t0, broken_logger):
    analyzer = TrendAnalyzer(*[_Raising() for _ in range(7)], logger=broken_logger)
    result = analyzer.analyze_metric_trends({"cpu": 95.0}, t0)
    assert [i.severity for i in result.insights] == [InsightSeverity.critical]
    assert result.moving_averages == {}
