"""
tests/conftest.py
=================
Shared fixtures. Plots render with the non-interactive Agg backend.
"""

from datetime import datetime

import matplotlib
import pytest

matplotlib.use("Agg")


@pytest.fixture
def frozen_now():
    """Fixed clock so timestamps are reproducible."""
    return datetime(2026, 10, 19, 12, 0, 0)
