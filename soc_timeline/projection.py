"""
soc_timeline/projection.py
==========================
Battery SOC Timeline — Checkpoint Projector

Maps (capacity, load, SOC, mode) to the ordered list of 10 %-SOC
checkpoints the battery will cross before reaching its safety bound.

Discharge:
    start    = floor(SOC / step) · step
    percent  = start, start − step, …, safety_min
    ΔE       = capacity · (SOC − percent) / 100
    t        = ΔE / (load / 1000)

Charge (mirror):
    start    = ceil(SOC / step) · step
    percent  = start, start + step, …, safety_max
    ΔE       = capacity · (percent − SOC) / 100

Scope:
    - Stateless and synchronous; the clock is the only outside input and
      can be frozen through ``now``.
    - Validation failures are returned in the result, never partially
      computed timelines.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime

from soc_timeline.config import (
    CLOCK_FORMAT,
    HOURS_DECIMALS,
    MODE_CHARGE,
    MODE_DISCHARGE,
    MODES,
    SAFETY_MAX_PERCENT,
    SAFETY_MIN_PERCENT,
    SOC_MAX_PERCENT,
    SOC_MIN_PERCENT,
    STEP_PERCENT,
    TIME_PLACEHOLDER,
    TimelineConfig,
)
from soc_timeline.energy_model import (
    charge_anchor,
    compute_elapsed_hours,
    compute_energy_delta,
    discharge_anchor,
    elapsed_to_timestamp,
    watts_to_kilowatts,
)
from soc_timeline.errors import (
    AlreadyAtSafetyBound,
    InvalidCapacity,
    InvalidLoad,
    InvalidSoc,
    TimelineInputError,
)


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------

@dataclass
class Checkpoint:
    """One projected SOC boundary crossing.

    Attributes:
        percent:    SOC boundary [%], a multiple of the step.
        hours:      Raw elapsed time from ``now`` [hours]. May be
                    non-finite if a caller bypasses load validation.
        timestamp:  ``now + hours``, or ``None`` when ``hours`` is
                    negative or non-finite.
    """
    percent:   int
    hours:     float
    timestamp: datetime | None

    @property
    def hours_label(self) -> str:
        """Elapsed hours rounded for display, e.g. ``"0.75"`` or ``"inf"``."""
        return f"{self.hours:.{HOURS_DECIMALS}f}"

    @property
    def time_label(self) -> str:
        """Clock time of the crossing, or the placeholder."""
        if self.timestamp is None:
            return TIME_PLACEHOLDER
        return self.timestamp.strftime(CLOCK_FORMAT)


@dataclass
class TimelineResult:
    """Outcome of one projection: either checkpoints or an error.

    Attributes:
        mode:          ``"discharge"`` or ``"charge"``.
        generated_at:  Clock instant the timestamps are anchored to.
        checkpoints:   Ordered checkpoints (descending percent when
                       discharging, ascending when charging).
        error:         Validation failure; ``checkpoints`` is empty when set.
    """
    mode:         str
    generated_at: datetime
    checkpoints:  list[Checkpoint] = field(default_factory=list)
    error:        TimelineInputError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def validate_inputs(
    capacity_kwh: float,
    load_watts: float,
    soc_percent: float,
    mode: str = MODE_DISCHARGE,
    safety_min: float = SAFETY_MIN_PERCENT,
    safety_max: float = SAFETY_MAX_PERCENT,
) -> None:
    """Check projection inputs, first failure wins.

    Raises:
        InvalidCapacity:       capacity is not a finite number > 0.
        InvalidLoad:           load is not a finite number > 0.
        InvalidSoc:            SOC is not a finite number in [0, 100].
        AlreadyAtSafetyBound:  SOC <= safety_min (discharge) or
                               SOC >= safety_max (charge).
        ValueError:            ``mode`` is not a known mode.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode {mode!r}; expected one of {MODES}")

    if not _is_finite_number(capacity_kwh) or capacity_kwh <= 0:
        raise InvalidCapacity("Enter a valid capacity > 0")
    if not _is_finite_number(load_watts) or load_watts <= 0:
        raise InvalidLoad("Enter a valid load > 0")
    if not _is_finite_number(soc_percent) or not (SOC_MIN_PERCENT <= soc_percent <= SOC_MAX_PERCENT):
        raise InvalidSoc("SOC must be between 0 and 100")

    if mode == MODE_DISCHARGE and soc_percent <= safety_min:
        raise AlreadyAtSafetyBound(
            f"SOC is already at or below the safe minimum ({safety_min:g}%)"
        )
    if mode == MODE_CHARGE and soc_percent >= safety_max:
        raise AlreadyAtSafetyBound(
            f"SOC is already at or above the safe maximum ({safety_max:g}%)"
        )


# ---------------------------------------------------------------------------
# Checkpoint generation
# ---------------------------------------------------------------------------

def _checkpoint_percents(
    soc_percent: float,
    mode: str,
    safety_min: float,
    safety_max: float,
    step: int,
) -> list[int]:
    """Boundaries to project, in traversal order."""
    percents: list[int] = []
    if mode == MODE_DISCHARGE:
        percent = discharge_anchor(soc_percent, step)
        while percent >= safety_min:
            # never ahead of the current SOC
            if percent <= soc_percent:
                percents.append(percent)
            percent -= step
    else:
        percent = charge_anchor(soc_percent, step)
        while percent <= safety_max:
            if percent >= soc_percent:
                percents.append(percent)
            percent += step
    return percents


def compute_checkpoints(
    capacity_kwh: float,
    load_watts: float,
    soc_percent: float,
    mode: str,
    now: datetime,
    safety_min: float = SAFETY_MIN_PERCENT,
    safety_max: float = SAFETY_MAX_PERCENT,
    step: int = STEP_PERCENT,
) -> list[Checkpoint]:
    """Project checkpoints without validating the inputs.

    Callers are expected to have run :func:`validate_inputs`. With a zero
    load the hours come out non-finite and the timestamps as ``None``.

    Raises:
        ValueError: If the safety window or step is unusable.
    """
    TimelineConfig(safety_min=safety_min, safety_max=safety_max, step=step)
    load_kw = watts_to_kilowatts(load_watts)
    checkpoints: list[Checkpoint] = []

    for percent in _checkpoint_percents(soc_percent, mode, safety_min, safety_max, step):
        delta_percent = soc_percent - percent if mode == MODE_DISCHARGE else percent - soc_percent
        energy_kwh = compute_energy_delta(capacity_kwh, delta_percent)
        hours = compute_elapsed_hours(energy_kwh, load_kw)
        checkpoints.append(
            Checkpoint(
                percent=percent,
                hours=hours,
                timestamp=elapsed_to_timestamp(now, hours),
            )
        )

    return checkpoints


def project_timeline(
    capacity_kwh: float,
    load_watts: float,
    soc_percent: float,
    mode: str = MODE_DISCHARGE,
    safety_min: float = SAFETY_MIN_PERCENT,
    safety_max: float = SAFETY_MAX_PERCENT,
    now: datetime | None = None,
    step: int = STEP_PERCENT,
) -> TimelineResult:
    """Project the SOC timeline for a constant load or charging power.

    Args:
        capacity_kwh: Usable pack capacity [kWh], > 0.
        load_watts:   Discharge load or charging power [W], > 0.
        soc_percent:  Present state of charge [%], in [0, 100].
        mode:         ``"discharge"`` (default) or ``"charge"``.
        safety_min:   Lowest SOC projected when discharging [%].
        safety_max:   Highest SOC projected when charging [%].
        now:          Anchor for timestamps; defaults to the local clock.
        step:         Checkpoint spacing [percentage points].

    Returns:
        :class:`TimelineResult` holding either the checkpoints or the
        validation error, never both.

    Raises:
        ValueError: If ``mode`` is not a known mode, or the safety
                    window or step is unusable.

    Example:
        >>> result = project_timeline(15.0, 1000.0, 55.0)
        >>> [(c.percent, c.hours_label) for c in result.checkpoints][:2]
        [(50, '0.75'), (40, '2.25')]
    """
    if now is None:
        now = datetime.now()
    TimelineConfig(safety_min=safety_min, safety_max=safety_max, step=step)

    try:
        validate_inputs(capacity_kwh, load_watts, soc_percent, mode, safety_min, safety_max)
    except TimelineInputError as exc:
        return TimelineResult(mode=mode, generated_at=now, error=exc)

    checkpoints = compute_checkpoints(
        capacity_kwh=float(capacity_kwh),
        load_watts=float(load_watts),
        soc_percent=float(soc_percent),
        mode=mode,
        now=now,
        safety_min=safety_min,
        safety_max=safety_max,
        step=step,
    )
    return TimelineResult(mode=mode, generated_at=now, checkpoints=checkpoints)
