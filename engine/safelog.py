"""
Logging helper for the trend updaters: a log call that can never raise into the analysis path, so a failing sink costs a message and never a metric.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging


def emit(logger: logging.Logger, level: int, msg: str, *args, **kwargs) -> None:
    try:
        logger.log(level, msg, *args, **kwargs)
    except Exception:
        pass
