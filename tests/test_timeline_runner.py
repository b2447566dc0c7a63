"""
tests/test_timeline_runner.py
=============================
Battery SOC Timeline — Console Runner Tests
"""

import timeline_runner
from soc_timeline.config import TimelineConfig
from soc_timeline.projection import project_timeline


class TestRunnerReport:

    def test_discharge_report(self, capsys):
        code = timeline_runner.main(["--capacity", "15", "--load", "1000", "--soc", "55", "--no-plot"])
        out = capsys.readouterr().out
        assert code == 0
        assert "BATTERY DISCHARGE TIMELINE" in out
        assert "0.75 hours remaining" in out
        assert "6.75 hours remaining" in out

    def test_charge_mode_from_query(self, capsys):
        code = timeline_runner.main([
            "--capacity", "10", "--load", "2000", "--soc", "42",
            "--query", "mode=charge", "--no-plot",
        ])
        out = capsys.readouterr().out
        assert code == 0
        assert "BATTERY CHARGE TIMELINE" in out
        assert "2.90 hours to reach" in out

    def test_mode_flag_overrides_query(self, capsys):
        timeline_runner.main([
            "--load", "1000", "--soc", "55", "--query", "mode=charge",
            "--mode", "discharge", "--no-plot",
        ])
        assert "DISCHARGE TIMELINE" in capsys.readouterr().out

    def test_auxiliary_current_is_printed(self, capsys):
        timeline_runner.main(["--load", "960", "--voltage", "48", "--soc", "55", "--no-plot"])
        assert "20.00 A" in capsys.readouterr().out

    def test_invalid_input_reports_error(self, capsys):
        code = timeline_runner.main(["--capacity", "0", "--load", "1000", "--no-plot"])
        out = capsys.readouterr().out
        assert code == 1
        assert "Enter a valid capacity > 0" in out

    def test_default_load_is_an_error(self, capsys):
        assert timeline_runner.main(["--no-plot"]) == 1
        assert "Enter a valid load > 0" in capsys.readouterr().out


class TestRunnerPlot:

    def test_plot_is_written(self, tmp_path, frozen_now):
        output = tmp_path / "timeline.png"
        result = project_timeline(15.0, 1000.0, 55.0, now=frozen_now)
        timeline_runner.plot_timeline(result, TimelineConfig(), output=str(output), show=False)
        assert output.exists()
        assert output.stat().st_size > 0

    def test_main_writes_plot(self, tmp_path, monkeypatch):
        monkeypatch.setattr(timeline_runner.plt, "show", lambda: None)
        output = tmp_path / "charge.png"
        code = timeline_runner.main([
            "--capacity", "10", "--load", "2000", "--soc", "42",
            "--mode", "charge", "--output", str(output),
        ])
        assert code == 0
        assert output.exists()

    def test_nothing_to_plot(self, tmp_path, frozen_now):
        output = tmp_path / "empty.png"
        result = project_timeline(0.0, 1000.0, 55.0, now=frozen_now)
        timeline_runner.plot_timeline(result, TimelineConfig(), output=str(output), show=False)
        assert not output.exists()
