"""
Deduplication of metric anomalies to one finding per metric.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.dedup.grouping import AnomalyGroup, deduplicate_by_metric, group_metric_anomalies

__all__ = ["AnomalyGroup", "deduplicate_by_metric", "group_metric_anomalies"]
