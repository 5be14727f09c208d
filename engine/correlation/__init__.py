"""
Correlation logic for identifying live metrics whose recent values co-vary, to group related signals for downstream strategy selection.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.pairwise import CorrelationUpdater, pearson

__all__ = ["CorrelationUpdater", "pearson"]
