"""
Moving average tracking for live metric streams, maintaining short, medium and long simple moving averages over a bounded per-metric history together with an exponentially weighted average that carries across calls.

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
from engine.models import MovingAverageData
from engine.safelog import emit

log = logging.getLogger(__name__)


def _clamp_alpha(alpha: float) -> float:
    if not math.isfinite(alpha):
        return 0.0
    return min(max(alpha, 0.0), 1.0)


def _window_mean(vals: List[float], window: int) -> float:
    if window < 1:
        return vals[-1]
    arr = np.array(vals[-window:], dtype=float)
    # divide before summing so readings near float max cannot overflow
    mean = float(np.sum(arr / arr.size))
    return mean if math.isfinite(mean) else vals[-1]


def _ema(value: float, previous: Optional[float], alpha: float) -> float:
    if previous is None or not math.isfinite(previous):
        return value
    ema = value * alpha + previous * (1 - alpha)
    return ema if math.isfinite(ema) else value


class MovingAverageUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[Tuple[datetime, float]] = BoundedHistory(
            self._config.moving_average_history_size
        )
        self._ema: Dict[str, float] = {}

    def _windows(self) -> Tuple[int, int, int]:
        windows = list(self._config.moving_average_windows) or [1]
        while len(windows) < 3:
            windows.append(windows[-1])
        return windows[0], windows[1], windows[2]

    def update_moving_averages(
        self, metrics: Dict[str, float], timestamp: datetime
    ) -> Dict[str, MovingAverageData]:
        result: Dict[str, MovingAverageData] = {}
        alpha = _clamp_alpha(self._config.ema_alpha)
        short, medium, long_ = self._windows()

        for name, raw in metrics.items():
            try:
                value = float(raw)
            except (TypeError, ValueError):
                emit(self._log, logging.DEBUG, "skipping non-numeric moving average input for %s", name)
                continue
            if not math.isfinite(value):
                emit(self._log, logging.DEBUG, "skipping non-finite moving average input for %s", name)
                continue

            try:
                with self._history.lock:
                    window = self._history.append(name, (timestamp, value))
                    vals = [v for _, v in window]
                    ema = _ema(value, self._ema.get(name), alpha)
                    self._ema[name] = ema
                result[name] = MovingAverageData(
                    current_value=value,
                    ma_short=_window_mean(vals, short),
                    ma_medium=_window_mean(vals, medium),
                    ma_long=_window_mean(vals, long_),
                    ema=ema,
                    timestamp=timestamp,
                )
            except Exception as exc:
                emit(self._log, logging.WARNING, "moving average update failed for %s: %s", name, exc)
                result[name] = MovingAverageData.flat(value, timestamp)

        return result

    def get_history_size(self, metric_name: str) -> int:
        return self._history.size(metric_name)

    def get_exponential_average(self, metric_name: str) -> Optional[float]:
        with self._history.lock:
            return self._ema.get(metric_name)

    def clear_history(self) -> None:
        with self._history.lock:
            self._history.clear()
            self._ema.clear()
        emit(self._log, logging.DEBUG, "moving average history cleared")
