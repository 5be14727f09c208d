"""
Test cases for enums used in the analysis engine, including Severity, InsightSeverity, TrendDirection and the seasonal patterns, validating their properties and relationships.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.enums import ConfidenceLevel, DailyPattern, HourlyPattern, InsightSeverity, Severity, TrendDirection


def test_severity_from_z_score_and_weight():
    assert Severity.from_z_score(1.9) is None
    assert Severity.from_z_score(2.0) == Severity.medium
    assert Severity.from_z_score(-3.0) == Severity.high
    assert Severity.from_z_score(6.0) == Severity.critical
    assert Severity.low.weight() < Severity.medium.weight() < Severity.high.weight() < Severity.critical.weight()


def test_severity_cutoffs_follow_settings(monkeypatch):
    monkeypatch.setattr("config.settings.anomaly_z_threshold", 1.0)
    assert Severity.from_z_score(1.5) == Severity.medium


def test_insight_severity_from_anomaly():
    assert InsightSeverity.from_anomaly(Severity.critical) == InsightSeverity.critical
    assert InsightSeverity.from_anomaly(Severity.high) == InsightSeverity.warning
    assert InsightSeverity.from_anomaly(Severity.medium) == InsightSeverity.warning
    assert InsightSeverity.from_anomaly(Severity.low) == InsightSeverity.info


def test_string_values():
    assert TrendDirection.increasing.value == "increasing"
    assert HourlyPattern.business_hours == "business_hours"
    assert DailyPattern("weekend") is DailyPattern.weekend
    assert ConfidenceLevel("very_high") is ConfidenceLevel.very_high
    with pytest.raises(ValueError):
        Severity("severe")
