"""
Detection logic for identifying anomalous live metric readings with four independent statistical methods (z-score against the medium moving average, Tukey interquartile fences, percentage spike or drop against recent readings, and reading-to-reading velocity), each isolated so a failure in one never suppresses the others.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from config import Settings, settings
from engine.enums import Severity
from engine.history import BoundedHistory
from engine.models import MetricAnomaly, MovingAverageData
from engine.safelog import emit

log = logging.getLogger(__name__)

Detector = Callable[[str, float, MovingAverageData, List[float], datetime], Optional[MetricAnomaly]]


def _quartiles(vals: List[float]) -> Tuple[float, float, float]:
    arr = np.array(vals, dtype=float)
    # numpy's default percentile method interpolates linearly between ranks
    q1, median, q3 = np.percentile(arr, [25, 50, 75])
    return float(q1), float(median), float(q3)


def _std(vals: List[float]) -> float:
    return float(np.std(np.array(vals, dtype=float)))


def _finite(*vals: float) -> bool:
    return all(math.isfinite(v) for v in vals)


class AnomalyUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[float] = BoundedHistory(self._config.anomaly_history_size)
        self._detectors: List[Tuple[str, Detector]] = [
            ("z-score", self.detect_z_score),
            ("iqr", self.detect_iqr),
            ("spike", self.detect_spike),
            ("velocity", self.detect_velocity),
        ]

    def update_anomalies(
        self,
        metrics: Dict[str, float],
        moving_averages: Dict[str, MovingAverageData],
    ) -> List[MetricAnomaly]:
        anomalies: List[MetricAnomaly] = []
        for name, raw in metrics.items():
            ma = moving_averages.get(name)
            if ma is None:
                continue
            try:
                value = float(raw)
            except (TypeError, ValueError):
                continue
            if not math.isfinite(value):
                continue

            history = self._history.append(name, value)
            for label, detector in self._detectors:
                try:
                    anomaly = detector(name, value, ma, history, ma.timestamp)
                except Exception as exc:
                    emit(self._log, logging.WARNING, "%s detector failed for %s: %s", label, name, exc)
                    continue
                if anomaly is None:
                    continue
                anomalies.append(anomaly)
                emit(
                    self._log,
                    logging.WARNING,
                    "anomaly detected in %s (%s): %s",
                    name,
                    anomaly.severity.value,
                    anomaly.description,
                )
        return anomalies

    def detect_z_score(
        self,
        name: str,
        value: float,
        ma: MovingAverageData,
        history: List[float],
        timestamp: datetime,
    ) -> Optional[MetricAnomaly]:
        cfg = self._config
        expected = ma.ma_medium
        deviation = value - expected
        std = _std(history) if len(history) >= cfg.anomaly_std_min_history else math.nan
        if not math.isfinite(std):
            std = abs(expected) * cfg.anomaly_std_fallback_fraction
        if std == 0 or not math.isfinite(std):
            return None

        z = abs(deviation) / std
        if not _finite(deviation, z):
            return None
        severity = Severity.from_z_score(z, cfg)
        if severity is None:
            return None
        return MetricAnomaly(
            metric_name=name,
            current_value=value,
            expected_value=expected,
            deviation=deviation,
            z_score=z,
            severity=severity,
            timestamp=timestamp,
            description=f"Z-Score anomaly in {name}: value {value:.2f} deviates {z:.2f} std from {expected:.2f}",
        )

    def detect_iqr(
        self,
        name: str,
        value: float,
        ma: MovingAverageData,
        history: List[float],
        timestamp: datetime,
    ) -> Optional[MetricAnomaly]:
        cfg = self._config
        if len(history) < cfg.iqr_min_history:
            return None
        q1, median, q3 = _quartiles(history)
        iqr = q3 - q1
        if not _finite(q1, q3, iqr) or iqr <= 0:
            return None

        def _outside(multiplier: float) -> bool:
            return value < q1 - multiplier * iqr or value > q3 + multiplier * iqr

        if not _outside(cfg.iqr_multiplier):
            return None
        if _outside(cfg.iqr_extreme_multiplier * 2):
            severity = Severity.critical
        elif _outside(cfg.iqr_extreme_multiplier):
            severity = Severity.high
        else:
            severity = Severity.medium

        deviation = value - median
        z = abs(deviation) / iqr
        if not _finite(median, deviation, z):
            return None
        lower = q1 - cfg.iqr_multiplier * iqr
        upper = q3 + cfg.iqr_multiplier * iqr
        return MetricAnomaly(
            metric_name=name,
            current_value=value,
            expected_value=median,
            deviation=deviation,
            z_score=z,
            severity=severity,
            timestamp=timestamp,
            description=f"IQR anomaly in {name}: value {value:.2f} outside [{lower:.2f}, {upper:.2f}]",
        )

    def detect_spike(
        self,
        name: str,
        value: float,
        ma: MovingAverageData,
        history: List[float],
        timestamp: datetime,
    ) -> Optional[MetricAnomaly]:
        cfg = self._config
        prior = history[:-1]
        if len(prior) < 2:
            return None
        window = prior[-cfg.spike_baseline_window:] if cfg.spike_baseline_window > 0 else prior
        baseline = float(np.mean(window))
        if baseline == 0 or not math.isfinite(baseline):
            return None

        deviation = value - baseline
        change = deviation / abs(baseline) * 100.0
        if not _finite(deviation, change) or abs(change) < cfg.spike_percent_threshold:
            return None
        if change > 0:
            description = f"Spike detected in {name}: {change:.0f}% increase"
        else:
            description = f"Drop detected in {name}: {abs(change):.0f}% decrease"
        std = _std(window)
        z = abs(deviation) / std if std > 0 else 0.0
        return MetricAnomaly(
            metric_name=name,
            current_value=value,
            expected_value=baseline,
            deviation=deviation,
            z_score=z if math.isfinite(z) else 0.0,
            severity=Severity.high,
            timestamp=timestamp,
            description=description,
        )

    def detect_velocity(
        self,
        name: str,
        value: float,
        ma: MovingAverageData,
        history: List[float],
        timestamp: datetime,
    ) -> Optional[MetricAnomaly]:
        cfg = self._config
        if len(history) < 2:
            return None
        previous = history[-2]
        if previous == 0:
            return None

        deviation = value - previous
        fraction = abs(deviation) / abs(previous)
        threshold = cfg.anomaly_velocity_threshold
        if not _finite(deviation, fraction) or fraction <= threshold:
            return None
        severity = Severity.high if fraction > threshold * 2 else Severity.medium
        return MetricAnomaly(
            metric_name=name,
            current_value=value,
            expected_value=previous,
            deviation=deviation,
            z_score=0.0,
            severity=severity,
            timestamp=timestamp,
            description=f"High velocity in {name}: {fraction * 100:.0f}% change",
        )

    def get_history_size(self, metric_name: str) -> int:
        return self._history.size(metric_name)

    def clear_history(self) -> None:
        self._history.clear()
        emit(self._log, logging.DEBUG, "anomaly history cleared")
