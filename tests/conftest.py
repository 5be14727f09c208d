import logging
import os
import sys
from datetime import datetime, timezone

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from config import Settings
from engine.models import MovingAverageData


# Wednesday, inside business hours
WEEKDAY_NOON = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)
# Saturday, inside business hours
SATURDAY_NOON = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0() -> datetime:
    return WEEKDAY_NOON


@pytest.fixture
def cfg() -> Settings:
    """A private settings instance so tests can tweak knobs without touching
    the module-level singleton."""
    return Settings()


@pytest.fixture
def ma_for():
    """Build a MovingAverageData whose medium window is ``medium``."""

    def _build(medium: float, current: float | None = None, when: datetime = WEEKDAY_NOON) -> MovingAverageData:
        return MovingAverageData(
            current_value=medium if current is None else current,
            ma_short=medium,
            ma_medium=medium,
            ma_long=medium,
            ema=medium,
            timestamp=when,
        )

    return _build


class BrokenSinkLogger(logging.Logger):
    """A logger whose every call fails, at any level."""

    def _log(self, *args, **kwargs):
        raise RuntimeError("sink down")


@pytest.fixture
def broken_logger() -> logging.Logger:
    return BrokenSinkLogger("broken-sink")


# Keep collection focused on the tests directory; engine modules are imported
# by tests, never collected.
def pytest_ignore_collect(collection_path, config):
    if os.path.sep + "engine" + os.path.sep in str(collection_path):
        return True
