"""
Anomaly detection for live metric readings: the multi-method updater and the single-method performance check.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.anomaly.detection import AnomalyUpdater
from engine.anomaly.performance import detect_performance_anomalies

__all__ = ["AnomalyUpdater", "detect_performance_anomalies"]
