"""
tests/test_session.py
=====================
Battery SOC Timeline — Form Session and URL Mode Tests
"""

import logging
import math

import pytest

from soc_timeline.config import TimelineConfig
from soc_timeline.session import (
    TimelineSession,
    mode_from_query,
    mode_to_query,
    parse_number,
)


@pytest.fixture
def session():
    s = TimelineSession()
    s.set_field("capacity", "15")
    s.set_field("load", "1000")
    s.set_field("soc", "55")
    return s


# ---------------------------------------------------------------------------
# Parsing loosely typed form values
# ---------------------------------------------------------------------------

class TestParseNumber:

    @pytest.mark.parametrize("raw,expected", [
        ("15", 15.0), (" 12.5 ", 12.5), ("48V", 48.0), (".5", 0.5),
        ("-3", -3.0), ("1e3", 1000.0), ("7.", 7.0), (42, 42.0), (0.25, 0.25),
    ])
    def test_numeric_prefix(self, raw, expected):
        assert parse_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "kWh 15", None, True, [1]])
    def test_non_numeric_is_nan(self, raw):
        assert math.isnan(parse_number(raw))


# ---------------------------------------------------------------------------
# URL mode mirroring
# ---------------------------------------------------------------------------

class TestModeQuery:

    def test_absent_defaults_to_discharge(self):
        assert mode_from_query("") == "discharge"
        assert mode_from_query("?foo=1") == "discharge"

    def test_charge_is_read(self):
        assert mode_from_query("?mode=charge") == "charge"
        assert mode_from_query("mode=discharge") == "discharge"

    def test_first_duplicate_wins(self):
        assert mode_from_query("?mode=charge&mode=turbo") == "charge"
        assert mode_from_query("mode=discharge&mode=charge") == "discharge"

    def test_unrecognised_defaults_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="soc_timeline.session"):
            assert mode_from_query("mode=turbo") == "discharge"
        assert "turbo" in caplog.text

    def test_write_keeps_other_params(self):
        assert mode_to_query("charge", "a=1&mode=discharge") == "a=1&mode=charge"

    def test_default_mode_is_omitted(self):
        assert mode_to_query("discharge", "a=1&mode=charge") == "a=1"

    def test_write_unknown_mode_raises(self):
        with pytest.raises(ValueError, match="Unknown mode"):
            mode_to_query("idle")


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

class TestTimelineSession:

    def test_defaults(self):
        s = TimelineSession()
        assert s.values == {"capacity": 15.0, "voltage": 48.0, "load": 0.0, "soc": 100.0}
        assert s.mode == "discharge"
        assert s.error == ""
        assert s.results == []
        assert not s.busy

    def test_default_load_is_rejected(self):
        s = TimelineSession()
        s.calculate()
        assert s.error == "Enter a valid load > 0"
        assert s.results == []

    def test_calculate_success(self, session, frozen_now):
        result = session.calculate(now=frozen_now)
        assert result.ok
        assert [cp.percent for cp in session.results] == [50, 40, 30, 20, 10]
        assert session.error == ""
        assert not session.busy

    def test_error_replaces_previous_results(self, session, frozen_now):
        session.calculate(now=frozen_now)
        session.set_field("capacity", "0")
        result = session.calculate(now=frozen_now)
        assert result.error is not None
        assert session.error == "Enter a valid capacity > 0"
        assert session.results == []

    def test_success_clears_previous_error(self, session, frozen_now):
        session.set_field("soc", "abc")
        session.calculate(now=frozen_now)
        assert session.error == "SOC must be between 0 and 100"
        session.set_field("soc", "55")
        session.calculate(now=frozen_now)
        assert session.error == ""
        assert len(session.results) == 5

    def test_results_are_a_copy(self, session, frozen_now):
        session.calculate(now=frozen_now)
        session.results.clear()
        assert len(session.results) == 5

    def test_unknown_field_raises(self, session):
        with pytest.raises(KeyError):
            session.set_field("temperature", "25")

    def test_mode_from_initial_query(self):
        assert TimelineSession(query="?mode=charge").mode == "charge"

    def test_set_mode_updates_query(self, session):
        session.set_mode("charge")
        assert session.mode == "charge"
        assert session.query_string == "mode=charge"
        session.set_mode("discharge")
        assert session.query_string == ""

    def test_apply_query(self, session):
        assert session.apply_query("mode=charge&x=1") == "charge"
        assert session.mode == "charge"
        assert session.query_string == "mode=charge&x=1"

    def test_charge_mode_projection(self, frozen_now):
        s = TimelineSession(query="mode=charge")
        s.set_field("capacity", "10")
        s.set_field("load", "2000")
        s.set_field("soc", "42")
        s.calculate(now=frozen_now)
        assert [cp.hours_label for cp in s.results] == ["0.40", "0.90", "1.40", "1.90", "2.40", "2.90"]

    def test_config_safety_window_is_applied(self, frozen_now):
        s = TimelineSession(config=TimelineConfig(safety_min=20))
        s.set_field("load", "1000")
        s.set_field("soc", "20")
        s.calculate(now=frozen_now)
        assert "safe minimum (20%)" in s.error

    def test_current_amps(self, session):
        session.set_field("load", "960")
        assert session.current_amps == pytest.approx(20.0)
        session.set_field("voltage", "")
        assert session.current_amps is None

    def test_voltage_does_not_change_projection(self, session, frozen_now):
        first = session.calculate(now=frozen_now).checkpoints
        session.set_field("voltage", "12")
        assert session.calculate(now=frozen_now).checkpoints == first
