"""
Pytest fixtures for governance tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from align.governance.evaluator import Governor
from align.types import TimeWindow


@pytest.fixture
def governor():
    """Governor with default per-mode thresholds."""
    return Governor()


@pytest.fixture
def morning_window():
    """Three-hour wall-clock window, 09:00-12:00."""
    return TimeWindow(start="09:00", end="12:00")


@pytest.fixture
def two_hour_window():
    """Two-hour wall-clock window, 09:00-11:00."""
    return TimeWindow(start="09:00", end="11:00")
