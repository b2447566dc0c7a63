"""
soc_timeline/display.py
=======================
Battery SOC Timeline — Presentation Helpers

Colour bands and captions shared by the console report and the plot.
"""

from __future__ import annotations

from soc_timeline.config import (
    BAND_COLORS,
    BAND_HIGH_MIN_PERCENT,
    BAND_MEDIUM_MIN_PERCENT,
    MODE_CHARGE,
    MODE_DISCHARGE,
)


def soc_band(percent: float) -> str:
    """Classify a SOC value as ``"high"``, ``"medium"`` or ``"low"``.

    Example:
        >>> soc_band(60), soc_band(59), soc_band(29)
        ('high', 'medium', 'low')
    """
    if percent >= BAND_HIGH_MIN_PERCENT:
        return "high"
    if percent >= BAND_MEDIUM_MIN_PERCENT:
        return "medium"
    return "low"


def band_color(percent: float) -> str:
    """Hex colour of the band ``percent`` falls in."""
    return BAND_COLORS[soc_band(percent)]


def timeline_title(mode: str) -> str:
    if mode == MODE_CHARGE:
        return "Charge Timeline"
    return "Discharge Timeline"


def hours_caption(mode: str, hours_label: str) -> str:
    """Row caption for the elapsed hours of a checkpoint.

    Example:
        >>> hours_caption("discharge", "0.75")
        '0.75 hours remaining'
    """
    if mode == MODE_DISCHARGE:
        return f"{hours_label} hours remaining"
    return f"{hours_label} hours to reach"
