"""
Operator-facing insights derived from raw readings and trend analysis results.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.insights.rules import generate_basic_insights, generate_trend_insights

__all__ = ["generate_basic_insights", "generate_trend_insights"]
