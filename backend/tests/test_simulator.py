"""Tests for growth simulator."""

import pytest

from fund_tracker.errors import SimulationError
from fund_tracker.services.simulator import CompoundingFrequency, GrowthSimulator


@pytest.fixture
def simulator():
    return GrowthSimulator()


class TestYearly:
    def test_three_years_at_ten_percent(self, simulator):
        rows = simulator.simulate(1000, 10, 3, "yearly")
        assert [r.year for r in rows] == [1, 2, 3]
        expected = [(1000, 100, 1100), (1100, 110, 1210), (1210, 121, 1331)]
        for row, (start, growth, end) in zip(rows, expected):
            assert row.start_value == pytest.approx(start)
            assert row.growth_amount == pytest.approx(growth)
            assert row.end_value == pytest.approx(end)

    def test_zero_rate(self, simulator):
        rows = simulator.simulate(2500, 0, 4)
        assert len(rows) == 4
        for row in rows:
            assert row.growth_amount == 0
            assert row.start_value == row.end_value == 2500

    def test_rows_chain(self, simulator):
        rows = simulator.simulate(1000, 7.5, 10, CompoundingFrequency.YEARLY)
        for prev, nxt in zip(rows, rows[1:]):
            assert nxt.start_value == prev.end_value


class TestMonthly:
    def test_one_year_matches_annual_rate(self, simulator):
        rows = simulator.simulate(1000, 12, 1, "monthly")
        assert len(rows) == 1
        assert rows[0].start_value == 1000
        assert rows[0].end_value == pytest.approx(1120.0, rel=1e-6)
        assert rows[0].growth_amount == pytest.approx(120.0, rel=1e-6)

    def test_growth_is_sum_of_monthly_steps(self, simulator):
        rows = simulator.simulate(5000, 9, 3, "monthly")
        for row in rows:
            assert row.end_value - row.start_value == pytest.approx(row.growth_amount)

    def test_zero_rate(self, simulator):
        rows = simulator.simulate(800, 0, 2, "monthly")
        assert all(r.growth_amount == 0 and r.end_value == 800 for r in rows)


class TestEdgeCases:
    @pytest.mark.parametrize("frequency", ["yearly", "monthly"])
    def test_zero_years_is_empty(self, simulator, frequency):
        assert simulator.simulate(1000, 12, 0, frequency) == []

    @pytest.mark.parametrize("frequency", ["yearly", "monthly"])
    def test_repeat_calls_are_identical(self, simulator, frequency):
        first = simulator.simulate(12345.67, 11.5, 15, frequency)
        second = simulator.simulate(12345.67, 11.5, 15, frequency)
        assert first == second

    def test_negative_current_value_rejected(self, simulator):
        with pytest.raises(SimulationError):
            simulator.simulate(-1, 10, 3)

    def test_negative_years_rejected(self, simulator):
        with pytest.raises(SimulationError):
            simulator.simulate(1000, 10, -1)

    def test_unknown_frequency_rejected(self, simulator):
        with pytest.raises(SimulationError):
            simulator.simulate(1000, 10, 3, "weekly")


class TestSummarize:
    def test_growth_pct(self, simulator):
        rows = simulator.simulate(1000, 10, 2)
        summary = simulator.summarize(1000, rows)
        assert summary.final_value == pytest.approx(1210)
        assert summary.growth_pct == pytest.approx(21.0)

    def test_no_rows(self, simulator):
        summary = simulator.summarize(1000, [])
        assert summary.final_value == 1000
        assert summary.growth_pct == 0.0

    def test_zero_start_value(self, simulator):
        rows = simulator.simulate(0, 10, 2)
        assert simulator.summarize(0, rows).growth_pct == 0.0
