"""
Unit tests for pipeline timing instrumentation.
"""

import pytest

from slide_mosaic.pipeline import TimingLog, timed_phase


class TestTimingLog:
    """Tests for TimingLog."""

    def test_log_run_and_group(self):
        log = TimingLog()

        log.log_run("render", 1.5)
        log.log_group(0, "compose", 0.25)
        log.log_group(1, "compose", 0.75)

        assert log.run_timings == {"render": 1.5}
        assert log.get_slowest_groups(1) == [(1, 0.75)]

    def test_summary_lists_phases_and_groups(self):
        log = TimingLog()
        log.log_run("merge", 2.0)
        log.log_group(2, "compose", 0.5)

        summary = log.summary()

        assert "merge" in summary
        assert "group 3" in summary
        assert "Groups composed: 1" in summary

    def test_to_dict_uses_string_keys(self):
        log = TimingLog()
        log.log_group(0, "compose", 0.1)

        assert log.to_dict()["group_timings"] == {"0": {"compose": 0.1}}


class TestTimedPhase:
    """Tests for timed_phase()."""

    def test_timed_phase_records_run_metric(self):
        log = TimingLog()

        with timed_phase(log, "render"):
            pass

        assert "render" in log.run_timings
        assert log.run_timings["render"] >= 0

    def test_timed_phase_records_group_metric(self):
        log = TimingLog()

        with timed_phase(log, "compose", group_index=4):
            pass

        assert "compose" in log.group_timings[4]

    def test_timed_phase_records_even_on_error(self):
        log = TimingLog()

        with pytest.raises(RuntimeError):
            with timed_phase(log, "render"):
                raise RuntimeError("boom")

        assert "render" in log.run_timings

    def test_timed_phase_without_log_is_noop(self):
        with timed_phase(None, "render"):
            pass
