"""
soc_timeline/errors.py
======================
Battery SOC Timeline — Input Validation Errors

Every error here is user-correctable: it is reported as a single message
that replaces the previous timeline, never as a crash.
"""

from __future__ import annotations


class TimelineInputError(ValueError):
    """Base class for projection inputs that cannot produce a timeline."""

    kind: str = "invalid_input"


class InvalidCapacity(TimelineInputError):
    """Capacity missing, non-numeric, non-finite or <= 0."""

    kind = "invalid_capacity"


class InvalidLoad(TimelineInputError):
    """Load / charging power missing, non-numeric, non-finite or <= 0."""

    kind = "invalid_load"


class InvalidSoc(TimelineInputError):
    """SOC non-numeric or outside [0, 100]."""

    kind = "invalid_soc"


class AlreadyAtSafetyBound(TimelineInputError):
    """SOC already past the safety bound in the direction of travel."""

    kind = "already_at_safety_bound"
