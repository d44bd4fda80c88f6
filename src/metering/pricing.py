"""Pricing of consumed units."""

from dataclasses import dataclass

import constants
from models.config import PricingConfiguration


@dataclass(frozen=True)
class CostBreakdown:
    """Cost of one metered operation split by unit type."""

    input_cost: float
    output_cost: float
    total_cost: float

    def rounded(self, digits: int = constants.COST_DISPLAY_PRECISION) -> "CostBreakdown":
        """Return breakdown rounded for presentation."""
        return CostBreakdown(
            input_cost=round(self.input_cost, digits),
            output_cost=round(self.output_cost, digits),
            total_cost=round(self.total_cost, digits),
        )


@dataclass(frozen=True)
class Pricing:
    """Linear price list: separate rate per input and per output unit."""

    input_rate: float
    output_rate: float

    @classmethod
    def from_configuration(cls, config: PricingConfiguration) -> "Pricing":
        """Construct price list from the pricing section of configuration."""
        return cls(input_rate=config.input_rate, output_rate=config.output_rate)

    def cost_of(self, input_units: int, output_units: int) -> CostBreakdown:
        """Compute cost of consumed units."""
        if input_units < 0 or output_units < 0:
            raise ValueError("Consumed units can not be negative")
        input_cost = input_units * self.input_rate
        output_cost = output_units * self.output_rate
        return CostBreakdown(
            input_cost=input_cost,
            output_cost=output_cost,
            total_cost=input_cost + output_cost,
        )
