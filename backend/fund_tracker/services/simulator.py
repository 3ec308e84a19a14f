"""Portfolio growth simulator.

Projects a portfolio value forward under a fixed annual return.

Algorithm:
    yearly:  value_y = value_{y-1} * (1 + r / 100)
    monthly: m = (1 + r / 100) ** (1 / 12) - 1, applied 12 times per year

The monthly rate is derived geometrically from the annual rate, so twelve
monthly steps reproduce one yearly step up to floating point error.
"""

from dataclasses import dataclass
from enum import Enum

from fund_tracker.errors import SimulationError

MONTHS_PER_YEAR = 12


class CompoundingFrequency(str, Enum):
    YEARLY = "yearly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class SimulationRow:
    year: int
    start_value: float
    growth_amount: float
    end_value: float


@dataclass(frozen=True)
class SimulationSummary:
    final_value: float
    growth_pct: float


class GrowthSimulator:
    """Stateless compounding projection; every call starts from scratch."""

    def simulate(
        self,
        current_value: float,
        annual_return_percent: float,
        years: int,
        frequency: CompoundingFrequency | str = CompoundingFrequency.YEARLY,
    ) -> list[SimulationRow]:
        """Simulate `years` rows of growth starting from `current_value`.

        Args:
            current_value: Starting portfolio value, must be >= 0.
            annual_return_percent: Expected annual return, e.g. 12 for 12%.
            years: Number of years to project; 0 yields no rows.
            frequency: "yearly" or "monthly" compounding.

        Returns:
            One SimulationRow per year, year numbers starting at 1.
        """
        if isinstance(years, bool) or not isinstance(years, int):
            raise SimulationError(f"years must be an integer, got {years!r}")
        if years < 0:
            raise SimulationError(f"years must be >= 0, got {years}")
        if current_value < 0:
            raise SimulationError(f"current value must be >= 0, got {current_value}")
        try:
            frequency = CompoundingFrequency(frequency)
        except ValueError:
            raise SimulationError(f"Unknown compounding frequency: {frequency!r}")

        rows: list[SimulationRow] = []
        value = float(current_value)

        if frequency is CompoundingFrequency.YEARLY:
            for year in range(1, years + 1):
                start_value = value
                growth = value * (annual_return_percent / 100)
                value += growth
                rows.append(SimulationRow(year, start_value, growth, value))
            return rows

        if annual_return_percent < -100:
            # Fractional power of a negative base has no real root
            raise SimulationError(
                f"annual return below -100% cannot compound monthly: {annual_return_percent}"
            )
        monthly_rate = (1 + annual_return_percent / 100) ** (1 / MONTHS_PER_YEAR) - 1
        for year in range(1, years + 1):
            start_value = value
            yearly_growth = 0.0
            for _ in range(MONTHS_PER_YEAR):
                monthly_growth = value * monthly_rate
                yearly_growth += monthly_growth
                value += monthly_growth
            rows.append(SimulationRow(year, start_value, yearly_growth, value))
        return rows

    def summarize(
        self, current_value: float, rows: list[SimulationRow]
    ) -> SimulationSummary:
        """Final value and total growth percent over the whole horizon."""
        if not rows:
            return SimulationSummary(final_value=current_value, growth_pct=0.0)
        final_value = rows[-1].end_value
        growth_pct = (final_value / current_value - 1) * 100 if current_value > 0 else 0.0
        return SimulationSummary(final_value=final_value, growth_pct=growth_pct)


# Global instance
growth_simulator = GrowthSimulator()
