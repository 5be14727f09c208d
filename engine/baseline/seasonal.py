"""
Seasonal expectation for metric readings, classifying each timestamp into an hourly and daily bucket with a baseline multiplier and validating readings against that multiplier until the bucket has enough history for mean and standard deviation checks.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import Settings, settings
from engine.enums import DailyPattern, HourlyPattern
from engine.history import BoundedHistory
from engine.models import SeasonalBucketKey, SeasonalityPattern, SeasonalStatistics
from engine.safelog import emit

log = logging.getLogger(__name__)


def _in_ranges(hour: int, ranges: List[Tuple[int, int]]) -> bool:
    return any(start <= hour <= end for start, end in ranges)


def _statistics(vals: List[float]) -> Optional[SeasonalStatistics]:
    finite = np.array([v for v in vals if math.isfinite(v)], dtype=float)
    if finite.size == 0:
        return None
    mean = float(np.mean(finite))
    std_dev = float(np.std(finite))
    # readings near float max overflow the moments; such a bucket has no usable baseline
    if not (math.isfinite(mean) and math.isfinite(std_dev)):
        return None
    return SeasonalStatistics(mean=mean, std_dev=std_dev, sample_count=int(finite.size))


class SeasonalityUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[float] = BoundedHistory(self._config.seasonal_history_size)
        self._stats: Dict[SeasonalBucketKey, SeasonalStatistics] = {}

    def hourly_pattern(self, timestamp: datetime) -> HourlyPattern:
        hour = timestamp.hour
        if _in_ranges(hour, self._config.seasonal_business_hours):
            return HourlyPattern.business_hours
        if _in_ranges(hour, self._config.seasonal_transition_hours):
            return HourlyPattern.transition_hours
        return HourlyPattern.off_hours

    @staticmethod
    def daily_pattern(timestamp: datetime) -> DailyPattern:
        return DailyPattern.weekend if timestamp.weekday() >= 5 else DailyPattern.weekday

    def expected_multiplier(self, timestamp: datetime) -> float:
        cfg = self._config
        base = {
            HourlyPattern.off_hours: cfg.seasonal_off_hours_multiplier,
            HourlyPattern.transition_hours: cfg.seasonal_transition_multiplier,
            HourlyPattern.business_hours: cfg.seasonal_business_multiplier,
        }[self.hourly_pattern(timestamp)]
        if self.daily_pattern(timestamp) == DailyPattern.weekend:
            base *= cfg.seasonal_weekend_factor
        return base

    def bucket_key(self, timestamp: datetime) -> SeasonalBucketKey:
        return SeasonalBucketKey(hour=timestamp.hour, daily_pattern=self.daily_pattern(timestamp))

    def update_seasonality_patterns(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, SeasonalityPattern]:
        patterns: Dict[str, SeasonalityPattern] = {}
        hourly = self.hourly_pattern(timestamp)
        daily = self.daily_pattern(timestamp)
        expected = self.expected_multiplier(timestamp)
        key = self.bucket_key(timestamp)

        for name, raw in metrics.items():
            try:
                value = float(raw)
                matches = self._validate(key, value, expected)
            except Exception as exc:
                emit(self._log, logging.WARNING, "seasonality update failed for %s: %s", name, exc)
                continue
            if not matches:
                emit(
                    self._log,
                    logging.DEBUG,
                    "seasonal mismatch for %s: value=%s expected multiplier=%.2f (%s, %s)",
                    name, value, expected, hourly.value, daily.value,
                )
            patterns[name] = SeasonalityPattern(
                metric_name=name,
                hourly_pattern=hourly,
                daily_pattern=daily,
                expected_multiplier=expected,
                actual_value=value,
                matches_seasonality=matches,
                timestamp=timestamp,
            )
        return patterns

    def _validate(self, key: SeasonalBucketKey, value: float, expected: float) -> bool:
        cfg = self._config
        with self._history.lock:
            vals = self._history.append(key, value)
            stats = None
            if len(vals) >= cfg.seasonal_min_samples:
                stats = _statistics(vals)
                if stats is not None:
                    self._stats[key] = stats
                else:
                    self._stats.pop(key, None)

        if not math.isfinite(value):
            return False
        if stats is None or stats.sample_count < cfg.seasonal_min_samples:
            return cfg.seasonal_tolerance_low * expected <= value <= cfg.seasonal_tolerance_high * expected
        band = cfg.seasonal_std_band * stats.std_dev
        if not math.isfinite(band):
            return False
        return abs(value - stats.mean) <= band

    def get_history_size(self, key: SeasonalBucketKey) -> int:
        return self._history.size(key)

    def get_seasonal_statistics(self, key: SeasonalBucketKey) -> Optional[SeasonalStatistics]:
        with self._history.lock:
            return self._stats.get(key)

    def clear_history(self) -> None:
        with self._history.lock:
            self._history.clear()
            self._stats.clear()
        emit(self._log, logging.DEBUG, "seasonal history cleared")
