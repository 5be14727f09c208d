"""
Enumerations for Severity, Trend Directions, Seasonal Patterns and Confidence Levels

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import SEVERITY_WEIGHTS

class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    @classmethod
    def from_z_score(cls, z: float, config=None) -> Severity | None:
        # cutoffs live in settings so tests and runtime can tune them
        if config is None:
            from config import settings as config

        az = abs(z)
        if az < config.anomaly_z_threshold:
            return None
        if az < config.high_anomaly_z_threshold:
            return cls.medium
        if az < config.high_anomaly_z_threshold * config.critical_anomaly_z_multiplier:
            return cls.high
        return cls.critical

    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self.value]


class InsightSeverity(str, Enum):
    info = "info"
    warning = "warning"
    critical = "critical"

    @classmethod
    def from_anomaly(cls, severity: Severity) -> InsightSeverity:
        if severity == Severity.critical:
            return cls.critical
        if severity in (Severity.high, Severity.medium):
            return cls.warning
        return cls.info


class TrendDirection(str, Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"


class HourlyPattern(str, Enum):
    off_hours = "off_hours"
    transition_hours = "transition_hours"
    business_hours = "business_hours"


class DailyPattern(str, Enum):
    weekday = "weekday"
    weekend = "weekend"


class ConfidenceLevel(str, Enum):
    very_low = "very_low"
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very_high"
