"""
soc_timeline/energy_model.py
============================
Battery SOC Timeline — Pure Energy/Time Functions

Rules:
    - Every function is a pure, deterministic mapping.
    - Linear SOC model only: energy between two SOC values is
      capacity × ΔSOC / 100. No discharge curve, temperature or fade.
    - No I/O, no side effects.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from soc_timeline.config import WATTS_PER_KILOWATT


# ---------------------------------------------------------------------------
# Unit conversion
# ---------------------------------------------------------------------------

def watts_to_kilowatts(power_w: float) -> float:
    """Convert a power from W to kW.

    Example:
        >>> watts_to_kilowatts(1500.0)
        1.5
    """
    return power_w / WATTS_PER_KILOWATT


# ---------------------------------------------------------------------------
# Checkpoint anchoring
# ---------------------------------------------------------------------------

def discharge_anchor(soc_percent: float, step: int) -> int:
    """Largest multiple of ``step`` not exceeding ``soc_percent``.

    Example:
        >>> discharge_anchor(55.0, 10)
        50
    """
    return int(math.floor(soc_percent / step) * step)


def charge_anchor(soc_percent: float, step: int) -> int:
    """Smallest multiple of ``step`` not below ``soc_percent``.

    Example:
        >>> charge_anchor(42.0, 10)
        50
    """
    return int(math.ceil(soc_percent / step) * step)


# ---------------------------------------------------------------------------
# Energy and elapsed time
# ---------------------------------------------------------------------------

def compute_energy_delta(capacity_kwh: float, delta_percent: float) -> float:
    """Energy moved between two SOC values.

    Equation:
        ΔE = E_capacity · ΔSOC / 100

    Args:
        capacity_kwh:  Usable pack capacity [kWh].
        delta_percent: SOC distance [percentage points], >= 0 in the
                       direction of travel.

    Returns:
        ΔE [kWh].

    Example:
        >>> compute_energy_delta(15.0, 5.0)
        0.75
    """
    return capacity_kwh * delta_percent / 100.0


def compute_elapsed_hours(energy_kwh: float, power_kw: float) -> float:
    """Hours needed to move ``energy_kwh`` at a constant ``power_kw``.

    Equation:
        t = ΔE / P

    A zero power yields ``inf`` (or ``nan`` for zero energy) rather than
    raising; callers decide how to present a non-finite time.

    Example:
        >>> compute_elapsed_hours(0.75, 1.0)
        0.75
    """
    if power_kw == 0.0:
        return math.nan if energy_kwh == 0.0 else math.copysign(math.inf, energy_kwh)
    return energy_kwh / power_kw


def elapsed_to_timestamp(now: datetime, hours: float) -> datetime | None:
    """Wall-clock instant ``hours`` after ``now``.

    Returns ``None`` when ``hours`` is negative, non-finite or too large
    to represent as a datetime.
    """
    if not math.isfinite(hours) or hours < 0.0:
        return None
    try:
        return now + timedelta(hours=hours)
    except OverflowError:
        return None


# ---------------------------------------------------------------------------
# Auxiliary current display
# ---------------------------------------------------------------------------

def current_amps(load_watts: float, voltage_v: float) -> float | None:
    """Pack current implied by a load at the nominal voltage.

    Equation:
        I = P / V

    Returns ``None`` unless both values are positive and finite.

    Example:
        >>> current_amps(960.0, 48.0)
        20.0
    """
    if not (math.isfinite(load_watts) and math.isfinite(voltage_v)):
        return None
    if load_watts <= 0.0 or voltage_v <= 0.0:
        return None
    return load_watts / voltage_v
