"""
Trend characterization for live metrics: direction, velocity and linear regression.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.trend.direction import TrendDirectionUpdater
from engine.trend.regression import RegressionUpdater
from engine.trend.velocity import TrendVelocityUpdater

__all__ = ["TrendDirectionUpdater", "RegressionUpdater", "TrendVelocityUpdater"]
