"""
soc_timeline/session.py
=======================
Battery SOC Timeline — Form Session State

Owns everything a host UI keeps between renders: raw field values, the
selected mode, the last error message, the last checkpoint list and a
busy flag. The projector itself stays pure; this class is the only
place where loosely typed input is parsed and where state is mutated.

URL state:
    Only ``mode`` is mirrored to the query string (``mode=charge``).
    An absent or unrecognised value means ``discharge``; the default mode
    is written as an absent parameter.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from urllib.parse import parse_qsl, urlencode

from soc_timeline.config import (
    DEFAULT_CAPACITY_KWH,
    DEFAULT_LOAD_W,
    DEFAULT_MODE,
    DEFAULT_SOC_PERCENT,
    DEFAULT_VOLTAGE_V,
    MODE_QUERY_PARAM,
    MODES,
    TimelineConfig,
)
from soc_timeline.energy_model import current_amps
from soc_timeline.projection import Checkpoint, TimelineResult, project_timeline

logger = logging.getLogger(__name__)

FIELDS: tuple[str, ...] = ("capacity", "voltage", "load", "soc")

# Leading decimal literal, the part of a string parseFloat would accept
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------

def parse_number(raw: object) -> float:
    """Parse a form value into a float, ``nan`` when nothing numeric leads.

    Numbers pass through unchanged; strings are read up to the end of
    their leading decimal literal, so ``"12.5 kWh"`` gives ``12.5`` and
    ``"abc"`` gives ``nan``.

    Example:
        >>> parse_number(" 48V ")
        48.0
    """
    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return float(raw)
    if not isinstance(raw, str):
        return math.nan
    match = _NUMBER_PREFIX.match(raw.strip())
    if match is None:
        return math.nan
    return float(match.group(0))


# ---------------------------------------------------------------------------
# URL query mirroring
# ---------------------------------------------------------------------------

def mode_from_query(query: str) -> str:
    """Mode selected by a URL query string, defaulting to discharge."""
    # first occurrence wins, as with URLSearchParams.get
    value = next(
        (v for k, v in parse_qsl(query.lstrip("?"), keep_blank_values=True) if k == MODE_QUERY_PARAM),
        None,
    )
    if value is None:
        return DEFAULT_MODE
    if value not in MODES:
        logger.warning("Ignoring unrecognised %s=%r in query; using %s",
                       MODE_QUERY_PARAM, value, DEFAULT_MODE)
        return DEFAULT_MODE
    return value


def mode_to_query(mode: str, query: str = "") -> str:
    """Write ``mode`` into ``query``, keeping every other parameter."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode {mode!r}; expected one of {MODES}")
    params = [
        (key, value)
        for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True)
        if key != MODE_QUERY_PARAM
    ]
    if mode != DEFAULT_MODE:
        params.append((MODE_QUERY_PARAM, mode))
    return urlencode(params)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class TimelineSession:
    """Host-side state for one estimator form.

    Args:
        config: Safety window and step passed to the projector.
        query:  Initial URL query string; only ``mode`` is read from it.
    """

    def __init__(self, config: TimelineConfig | None = None, query: str = "") -> None:
        self._config: TimelineConfig = config or TimelineConfig()
        self._values: dict[str, float] = {
            "capacity": DEFAULT_CAPACITY_KWH,
            "voltage":  DEFAULT_VOLTAGE_V,
            "load":     DEFAULT_LOAD_W,
            "soc":      DEFAULT_SOC_PERCENT,
        }
        self._mode: str = mode_from_query(query)
        self._query: str = query.lstrip("?")
        self._error: str = ""
        self._results: list[Checkpoint] = []
        self._busy: bool = False

    # ------------------------------------------------------------------
    # Field updates
    # ------------------------------------------------------------------

    def set_field(self, name: str, raw: object) -> float:
        """Store a parsed field value and return it (``nan`` if unparsable)."""
        if name not in FIELDS:
            raise KeyError(f"Unknown field {name!r}; expected one of {FIELDS}")
        value = parse_number(raw)
        self._values[name] = value
        return value

    def set_mode(self, mode: str) -> None:
        """Switch mode and mirror it to the query string."""
        self._query = mode_to_query(mode, self._query)
        self._mode = mode

    def apply_query(self, query: str) -> str:
        """Adopt the mode carried by a (new) URL query string."""
        self._query = query.lstrip("?")
        self._mode = mode_from_query(query)
        return self._mode

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self, now: datetime | None = None) -> TimelineResult:
        """Recompute the timeline from the current field values.

        The previous error and results are discarded first; the new
        checkpoint list replaces them in a single assignment.
        """
        self._busy = True
        self._error = ""
        self._results = []
        try:
            result = project_timeline(
                capacity_kwh=self._values["capacity"],
                load_watts=self._values["load"],
                soc_percent=self._values["soc"],
                mode=self._mode,
                safety_min=self._config.safety_min,
                safety_max=self._config.safety_max,
                now=now,
                step=self._config.step,
            )
        finally:
            self._busy = False

        if result.error is not None:
            self._error = str(result.error)
            logger.info("Timeline not computed (%s): %s", result.error.kind, self._error)
        else:
            self._results = result.checkpoints
            logger.debug("Projected %d %s checkpoints", len(result.checkpoints), self._mode)
        return result

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> TimelineConfig:
        return self._config

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def values(self) -> dict[str, float]:
        """Copy of the parsed field values."""
        return dict(self._values)

    @property
    def error(self) -> str:
        """Last validation message, empty when the last run succeeded."""
        return self._error

    @property
    def results(self) -> list[Checkpoint]:
        return list(self._results)

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def query_string(self) -> str:
        return self._query

    @property
    def current_amps(self) -> float | None:
        """Load current at the entered voltage [A], ``None`` if undefined."""
        return current_amps(self._values["load"], self._values["voltage"])
