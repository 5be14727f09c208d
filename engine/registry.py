"""
Registry for the shared trend analyzer and its default updaters.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List

from config import Settings, settings
from engine.analyzer import TrendAnalyzer
from engine.anomaly import AnomalyUpdater
from engine.averages import MovingAverageUpdater
from engine.baseline import SeasonalityUpdater
from engine.correlation import CorrelationUpdater
from engine.trend import RegressionUpdater, TrendDirectionUpdater, TrendVelocityUpdater

log = logging.getLogger(__name__)


class AnalyzerRegistry:
    def __init__(self, config: Settings | None = None) -> None:
        self._config = config if config is not None else settings
        self._lock = threading.Lock()
        self._analyzer: TrendAnalyzer | None = None
        self._updaters: List[Any] = []

    def _build(self) -> TrendAnalyzer:
        cfg = self._config
        self._updaters = [
            MovingAverageUpdater(cfg),
            TrendDirectionUpdater(cfg),
            TrendVelocityUpdater(cfg),
            SeasonalityUpdater(cfg),
            RegressionUpdater(cfg),
            CorrelationUpdater(cfg),
            AnomalyUpdater(cfg),
        ]
        return TrendAnalyzer(*self._updaters, config=cfg)

    def get_analyzer(self) -> TrendAnalyzer:
        with self._lock:
            if self._analyzer is None:
                self._analyzer = self._build()
                log.debug("trend analyzer created")
            return self._analyzer

    def reset(self) -> None:
        with self._lock:
            for updater in self._updaters:
                clear = getattr(updater, "clear_history", None)
                if clear is not None:
                    clear()

    def evict(self) -> None:
        with self._lock:
            self._analyzer = None
            self._updaters = []


_registry = AnalyzerRegistry()


def build_analyzer(config: Settings | None = None) -> TrendAnalyzer:
    return AnalyzerRegistry(config).get_analyzer()


def get_registry() -> AnalyzerRegistry:
    return _registry


def get_analyzer() -> TrendAnalyzer:
    return _registry.get_analyzer()
