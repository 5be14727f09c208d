"""
Grouping logic for deduplication of anomalies, clustering candidate anomalies by metric name so that each metric is reported once with its most severe finding, to reduce noise for downstream consumers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, List, TypeVar

from engine.models import MetricAnomaly

T = TypeVar("T")


@dataclass
class AnomalyGroup(Generic[T]):
    representative: T
    members: List[T] = field(default_factory=list)
    count: int = 1


def group_metric_anomalies(anomalies: List[MetricAnomaly]) -> List[AnomalyGroup[MetricAnomaly]]:
    groups: Dict[str, AnomalyGroup[MetricAnomaly]] = {}
    for a in anomalies:
        current = groups.get(a.metric_name)
        if current is None:
            groups[a.metric_name] = AnomalyGroup(representative=a, members=[a])
            continue
        current.members.append(a)
        current.count += 1
        rep = current.representative
        # ties keep the stronger deviation
        if a.severity.weight() > rep.severity.weight() or (
            a.severity == rep.severity and abs(a.z_score) > abs(rep.z_score)
        ):
            current.representative = a
    return list(groups.values())


def deduplicate_by_metric(anomalies: List[MetricAnomaly]) -> List[MetricAnomaly]:
    return [g.representative for g in group_metric_anomalies(anomalies)]
