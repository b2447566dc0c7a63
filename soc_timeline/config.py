"""
soc_timeline/config.py
======================
Battery SOC Timeline — Constants and Projection Settings

Rules:
    - Constants only, plus one validated settings container.
    - Energy in kWh, power in W, SOC in percent [0, 100], time in hours.
    - Battery voltage is informational; it never enters the projection.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Timeline stepping and safety window
# ---------------------------------------------------------------------------

STEP_PERCENT: int = 10
"""Distance between consecutive checkpoints (percentage points)."""

SAFETY_MIN_PERCENT: int = 10
"""Lowest SOC projected when discharging (%).

Lithium-ion packs are not projected into the deep-discharge region.
"""

SAFETY_MAX_PERCENT: int = 100
"""Highest SOC projected when charging (%)."""

SOC_MIN_PERCENT: float = 0.0
SOC_MAX_PERCENT: float = 100.0

WATTS_PER_KILOWATT: float = 1000.0


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

MODE_DISCHARGE: str = "discharge"
MODE_CHARGE: str = "charge"
MODES: tuple[str, ...] = (MODE_DISCHARGE, MODE_CHARGE)
DEFAULT_MODE: str = MODE_DISCHARGE

MODE_QUERY_PARAM: str = "mode"
"""URL query parameter that mirrors the selected mode."""


# ---------------------------------------------------------------------------
# Form defaults (values shown before the user edits anything)
# ---------------------------------------------------------------------------

DEFAULT_CAPACITY_KWH: float = 15.0
DEFAULT_VOLTAGE_V: float = 48.0
DEFAULT_LOAD_W: float = 0.0
DEFAULT_SOC_PERCENT: float = 100.0


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

HOURS_DECIMALS: int = 2
CLOCK_FORMAT: str = "%H:%M"

TIME_PLACEHOLDER: str = "—"
"""Shown instead of a clock time when the elapsed hours are not usable."""

# SOC colour bands: >= 60 % high, >= 30 % medium, below that low
BAND_HIGH_MIN_PERCENT: int = 60
BAND_MEDIUM_MIN_PERCENT: int = 30

BAND_COLORS: dict[str, str] = {
    "high":   "#4CAF50",
    "medium": "#FF9800",
    "low":    "#F44336",
}


# ---------------------------------------------------------------------------
# Settings container
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimelineConfig:
    """Safety window and step used by a timeline session.

    Attributes:
        safety_min: Discharge projection stops at this SOC [%].
        safety_max: Charge projection stops at this SOC [%].
        step:       Checkpoint spacing [percentage points].

    Raises:
        ValueError: If the window is empty, leaves [0, 100], or the step
                    is not a positive integer.
    """
    safety_min: int = SAFETY_MIN_PERCENT
    safety_max: int = SAFETY_MAX_PERCENT
    step:       int = STEP_PERCENT

    def __post_init__(self) -> None:
        if not (SOC_MIN_PERCENT <= self.safety_min < self.safety_max <= SOC_MAX_PERCENT):
            raise ValueError(
                f"Safety window must satisfy 0 <= safety_min < safety_max <= 100; "
                f"received safety_min={self.safety_min!r}, safety_max={self.safety_max!r}"
            )
        if isinstance(self.step, bool) or not isinstance(self.step, int) or self.step <= 0:
            raise ValueError(
                f"Checkpoint step must be a positive integer; received step={self.step!r}"
            )
