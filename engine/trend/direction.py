"""
Trend direction classification from the gap between a metric's short and long moving averages.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from typing import Dict

from config import Settings, settings
from engine.enums import TrendDirection
from engine.models import MovingAverageData
from engine.safelog import emit

log = logging.getLogger(__name__)


def _relative_gap(ma: MovingAverageData) -> float:
    gap = ma.ma_short - ma.ma_long
    if ma.ma_long == 0:
        return gap
    return gap / abs(ma.ma_long)


class TrendDirectionUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log

    def classify(self, ma: MovingAverageData) -> TrendDirection:
        gap = _relative_gap(ma)
        threshold = abs(self._config.trend_direction_threshold)
        if not math.isfinite(gap):
            return TrendDirection.stable
        if gap > threshold:
            return TrendDirection.increasing
        if gap < -threshold:
            return TrendDirection.decreasing
        return TrendDirection.stable

    def update_trend_directions(
        self,
        metrics: Dict[str, float],
        moving_averages: Dict[str, MovingAverageData],
    ) -> Dict[str, TrendDirection]:
        directions: Dict[str, TrendDirection] = {}
        for name in metrics:
            ma = moving_averages.get(name)
            if ma is None:
                continue
            try:
                directions[name] = self.classify(ma)
            except Exception as exc:
                emit(self._log, logging.WARNING, "trend direction failed for %s: %s", name, exc)
                directions[name] = TrendDirection.stable
        return directions
