"""
Per-metric linear regression over the retained sample window, reporting slope, intercept and fit quality along with a derived trend direction and confidence level.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Dict, List, Tuple

import numpy as np
from scipy.stats import linregress

from config import Settings, settings
from engine.enums import ConfidenceLevel, TrendDirection
from engine.history import BoundedHistory
from engine.models import RegressionResult
from engine.safelog import emit

log = logging.getLogger(__name__)


def _finite_or_zero(x: float) -> float:
    x = float(x)
    return x if math.isfinite(x) else 0.0


def _fit(vals: List[float]) -> Tuple[float, float, float]:
    if len(vals) < 2:
        return 0.0, 0.0, 0.0
    x = np.arange(1, len(vals) + 1, dtype=float)
    y = np.array(vals, dtype=float)
    if np.ptp(y) == 0:
        return 0.0, float(y[0]), 0.0
    fit = linregress(x, y)
    return _finite_or_zero(fit.slope), _finite_or_zero(fit.intercept), _finite_or_zero(fit.rvalue ** 2)


class RegressionUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[float] = BoundedHistory(self._config.regression_history_size)

    def update_regression_results(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, RegressionResult]:
        results: Dict[str, RegressionResult] = {}
        for name, raw in metrics.items():
            try:
                value = float(raw)
                if math.isfinite(value):
                    vals = self._history.append(name, value)
                else:
                    vals = self._history.snapshot(name)
                slope, intercept, r2 = _fit(vals)
                results[name] = RegressionResult(
                    slope=slope,
                    intercept=intercept,
                    r_squared=r2,
                    sample_count=len(vals),
                    direction=self.get_trend_direction(slope),
                    confidence=self.get_confidence_level(r2),
                    timestamp=timestamp,
                )
            except Exception as exc:
                emit(self._log, logging.WARNING, "regression update failed for %s: %s", name, exc)
                results[name] = RegressionResult(timestamp=timestamp)
        return results

    def get_trend_direction(self, slope: float) -> TrendDirection:
        threshold = self._config.regression_slope_threshold
        if not math.isfinite(slope) or abs(slope) <= threshold:
            return TrendDirection.stable
        return TrendDirection.increasing if slope > 0 else TrendDirection.decreasing

    def get_confidence_level(self, r_squared: float) -> ConfidenceLevel:
        if not math.isfinite(r_squared):
            return ConfidenceLevel.very_low
        for cutoff, label in self._config.regression_confidence_levels:
            if r_squared >= cutoff:
                return ConfidenceLevel(label)
        return ConfidenceLevel.very_low

    def get_history_size(self, metric_name: str) -> int:
        return self._history.size(metric_name)

    def clear_history(self) -> None:
        self._history.clear()
        emit(self._log, logging.DEBUG, "regression history cleared")
