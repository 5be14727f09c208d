"""
Pairwise correlation of live metrics, grouping metric names whose recent values move together (or inversely) strongly enough to cross the configured Pearson threshold.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import math
from typing import Dict, FrozenSet, List, Optional

import numpy as np

from config import Settings, settings
from engine.history import BoundedHistory
from engine.safelog import emit

log = logging.getLogger(__name__)


def correlation_matrix(rows: np.ndarray) -> np.ndarray:
    """Pearson coefficients between the rows of a (metrics x samples) matrix.

    Each row is rescaled by its largest magnitude before centering, so readings
    close to the float limits stay finite. A constant row correlates 0 with
    every other row.
    """
    rows = np.asarray(rows, dtype=float)
    coeffs = np.zeros((rows.shape[0], rows.shape[0]))
    live = np.flatnonzero(np.ptp(rows, axis=1) > 0)
    if live.size < 2:
        return coeffs
    scaled = rows[live] / np.max(np.abs(rows[live]), axis=1, keepdims=True)
    centered = scaled - scaled.mean(axis=1, keepdims=True)
    norms = np.sqrt(np.sum(centered * centered, axis=1))
    usable = norms > 0
    live = live[usable]
    unit = centered[usable] / norms[usable][:, None]
    coeffs[np.ix_(live, live)] = np.clip(unit @ unit.T, -1.0, 1.0)
    return coeffs


def pearson(a_vals: List[float], b_vals: List[float], min_samples: int = 3) -> float:
    n = min(len(a_vals), len(b_vals))
    if n < max(min_samples, 2):
        return 0.0
    return float(correlation_matrix(np.array([a_vals[-n:], b_vals[-n:]], dtype=float))[0, 1])


class CorrelationUpdater:
    def __init__(self, config: Settings | None = None, logger: logging.Logger | None = None) -> None:
        self._config = config if config is not None else settings
        self._log = logger or log
        self._history: BoundedHistory[float] = BoundedHistory(self._config.correlation_history_size)
        self._coefficients: Dict[FrozenSet[str], float] = {}

    def update_correlations(self, metrics: Dict[str, float]) -> Dict[str, List[str]]:
        try:
            return self._update(metrics)
        except Exception as exc:
            emit(self._log, logging.WARNING, "correlation update failed: %s", exc)
            return {}

    def _update(self, metrics: Dict[str, float]) -> Dict[str, List[str]]:
        cfg = self._config
        series: Dict[str, List[float]] = {}
        with self._history.lock:
            for name, raw in metrics.items():
                try:
                    value = float(raw)
                except (TypeError, ValueError):
                    continue
                if math.isfinite(value):
                    series[name] = self._history.append(name, value)

        names = list(series)
        coeffs = self._pairwise(names, series, max(cfg.correlation_min_samples, 2))

        related: Dict[str, List[str]] = {}
        with self._history.lock:
            for i, first in enumerate(names):
                for j in range(i + 1, len(names)):
                    second = names[j]
                    r = float(coeffs[i, j])
                    self._coefficients[frozenset((first, second))] = r
                    if abs(r) >= cfg.correlation_threshold:
                        related.setdefault(first, []).append(second)
                        related.setdefault(second, []).append(first)

        if related:
            emit(self._log, logging.DEBUG, "correlated metrics found: %s", related)
        return related

    @staticmethod
    def _pairwise(names: List[str], series: Dict[str, List[float]], min_samples: int) -> np.ndarray:
        # a pair aligns on its shorter history, so one matrix per distinct length
        lengths = np.array([len(series[name]) for name in names], dtype=int)
        coeffs = np.zeros((len(names), len(names)))
        for n in np.unique(lengths):
            if n < min_samples:
                continue
            members = np.flatnonzero(lengths >= n)
            if members.size < 2:
                continue
            block = correlation_matrix(np.array([series[names[m]][-n:] for m in members], dtype=float))
            aligned = np.minimum.outer(lengths[members], lengths[members]) == n
            grid = np.ix_(members, members)
            coeffs[grid] = np.where(aligned, block, coeffs[grid])
        return coeffs

    def get_correlation(self, first: str, second: str) -> Optional[float]:
        with self._history.lock:
            return self._coefficients.get(frozenset((first, second)))

    def get_history_size(self, metric_name: str) -> int:
        return self._history.size(metric_name)

    def clear_history(self) -> None:
        with self._history.lock:
            self._history.clear()
            self._coefficients.clear()
        emit(self._log, logging.DEBUG, "correlation history cleared")
