"""
Rate of change tracking for live metrics, combining a two-point delta with a recency-weighted regression slope over the retained history, expressed in units per minute.

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
from engine.history import BoundedHistory
from engine.safelog import emit

log = logging.getLogger(__name__)


def _weighted_slope(points: List[Tuple[datetime, float]]) -> float:
    origin = points[0][0]
    minutes = np.array([(ts - origin).total_seconds() / 60.0 for ts, _ in points], dtype=float)
    vals = np.array([v for _, v in points], dtype=float)
    if np.ptp(minutes) == 0:
        return 0.0
    # polyfit squares the weights, so pass sqrt to weight residuals by 1..n
    weights = np.sqrt(np.arange(1, len(points) + 1, dtype=float))
    slope, _ = np.polyfit(minutes, vals, 1, w=weights)
    return float(slope)


def _blend(simple: float, weighted: float) -> float:
    if not math.isfinite(weighted):
        return simple
    if simple * weighted < 0:
        return simple
    return (simple + weighted) / 2.0


class TrendVelocityUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[Tuple[datetime, float]] = BoundedHistory(
            self._config.velocity_history_size
        )

    def update_trend_velocities(self, metrics: Dict[str, float], timestamp: datetime) -> Dict[str, float]:
        if metrics is None:
            raise ValueError("metrics must not be None")

        velocities: Dict[str, float] = {}
        for name, value in metrics.items():
            try:
                velocities[name] = self._velocity(name, float(value), timestamp)
            except Exception as exc:
                velocities[name] = 0.0
                emit(self._log, logging.WARNING, "velocity calculation failed for %s: %s", name, exc)
        return velocities

    def _velocity(self, name: str, value: float, timestamp: datetime) -> float:
        if not math.isfinite(value):
            return 0.0
        with self._history.lock:
            previous = self._history.last(name)
            if previous is None:
                self._history.append(name, (timestamp, value))
                return 0.0

            prev_ts, prev_value = previous
            elapsed = (timestamp - prev_ts).total_seconds()
            if elapsed < self._config.velocity_min_elapsed_seconds:
                self._log.debug("insufficient time elapsed for %s velocity (%.3fs)", name, elapsed)
                return 0.0

            points = self._history.append(name, (timestamp, value))

        simple = (value - prev_value) / (elapsed / 60.0)
        velocity = simple
        if len(points) >= self._config.velocity_regression_min_points:
            velocity = _blend(simple, _weighted_slope(points))

        if not math.isfinite(velocity):
            return 0.0
        if abs(velocity) > self._config.high_velocity_threshold:
            self._log.debug("high velocity detected for %s: %.4f/min", name, velocity)
        return velocity

    def get_history_size(self, metric_name: str) -> int:
        return self._history.size(metric_name)

    def get_previous_value(self, metric_name: str) -> Optional[float]:
        last = self._history.last(metric_name)
        return None if last is None else last[1]

    def clear_history(self) -> None:
        self._history.clear()
        emit(self._log, logging.DEBUG, "velocity history cleared")
