"""
Constants and configuration for Relay Trends.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import List, Tuple

from pydantic_settings import BaseSettings


RELAY_TRENDS_EMA_ALPHA: float = float(os.getenv("RELAY_TRENDS_EMA_ALPHA", "0.3"))
RELAY_TRENDS_CORRELATION_THRESHOLD: float = float(os.getenv("RELAY_TRENDS_CORRELATION_THRESHOLD", "0.7"))

# weight values assigned to severity labels for comparison and ranking
SEVERITY_WEIGHTS: dict[str, int] = {
    "low": 1,
    "medium": 2,
    "high": 4,
    "critical": 8,
}


class Settings(BaseSettings):
    # moving averages: short / medium / long windows, in samples
    moving_average_windows: List[int] = [5, 15, 60]
    moving_average_history_size: int = 60
    ema_alpha: float = RELAY_TRENDS_EMA_ALPHA

    # trend direction from the short/long moving average gap
    trend_direction_threshold: float = 0.05

    # velocity (units per minute)
    velocity_history_size: int = 60
    velocity_min_elapsed_seconds: float = 1.0
    velocity_regression_min_points: int = 5
    high_velocity_threshold: float = 0.1

    # seasonal buckets
    seasonal_history_size: int = 100
    seasonal_min_samples: int = 3
    seasonal_std_band: float = 2.0
    seasonal_tolerance_low: float = 0.5
    seasonal_tolerance_high: float = 1.5
    seasonal_off_hours_multiplier: float = 0.5
    seasonal_transition_multiplier: float = 1.0
    seasonal_business_multiplier: float = 1.5
    seasonal_weekend_factor: float = 0.6
    # (start_hour, end_hour) inclusive ranges
    seasonal_business_hours: List[Tuple[int, int]] = [(9, 17)]
    seasonal_transition_hours: List[Tuple[int, int]] = [(6, 8), (18, 21)]

    # linear regression
    regression_history_size: int = 60
    regression_slope_threshold: float = 0.01
    regression_confidence_levels: List[Tuple[float, str]] = [
        (0.9, "very_high"),
        (0.7, "high"),
        (0.5, "medium"),
        (0.3, "low"),
    ]

    # cross metric correlation
    correlation_history_size: int = 100
    correlation_min_samples: int = 3
    correlation_threshold: float = RELAY_TRENDS_CORRELATION_THRESHOLD

    # multi-method anomaly detection
    anomaly_history_size: int = 100
    anomaly_z_threshold: float = 2.0
    high_anomaly_z_threshold: float = 3.0
    critical_anomaly_z_multiplier: float = 2.0
    anomaly_std_min_history: int = 10
    anomaly_std_fallback_fraction: float = 0.1
    iqr_min_history: int = 5
    iqr_multiplier: float = 1.5
    iqr_extreme_multiplier: float = 3.0
    spike_percent_threshold: float = 50.0
    spike_baseline_window: int = 10
    anomaly_velocity_threshold: float = 0.5

    # single-method z-score staircase, highest cutoff first
    performance_anomaly_levels: List[Tuple[float, str]] = [
        (4.0, "high"),
        (2.0, "medium"),
    ]

    # insight rules
    insight_resource_keywords: List[str] = ["cpu", "memory"]
    insight_critical_utilization: float = 90.0
    insight_warning_utilization: float = 80.0
    trend_insight_velocity: float = 0.1
    trend_insight_velocity_critical: float = 0.5

    model_config = {"env_prefix": "RELAY_TRENDS_", "extra": "ignore"}


settings = Settings()
