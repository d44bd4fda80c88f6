"""Unit tests for pricing of consumed units."""

import pytest

from metering.pricing import CostBreakdown, Pricing
from models.config import PricingConfiguration


def test_cost_of() -> None:
    """Test cost computed from separate input and output rates."""
    pricing = Pricing(input_rate=0.000003, output_rate=0.000015)
    cost = pricing.cost_of(50, 20)
    assert cost.input_cost == pytest.approx(0.00015)
    assert cost.output_cost == pytest.approx(0.0003)
    assert cost.total_cost == pytest.approx(0.00045)


def test_cost_of_nothing() -> None:
    """Test that no consumption costs nothing."""
    pricing = Pricing(input_rate=0.000003, output_rate=0.000015)
    assert pricing.cost_of(0, 0) == CostBreakdown(0.0, 0.0, 0.0)


def test_cost_of_negative_units() -> None:
    """Test that negative consumption is rejected."""
    pricing = Pricing(input_rate=1.0, output_rate=1.0)
    with pytest.raises(ValueError, match="can not be negative"):
        pricing.cost_of(-1, 0)
    with pytest.raises(ValueError, match="can not be negative"):
        pricing.cost_of(0, -1)


def test_from_configuration() -> None:
    """Test that rates are taken from configuration."""
    pricing = Pricing.from_configuration(
        PricingConfiguration(input_rate=0.5, output_rate=2.0)
    )
    assert pricing.cost_of(2, 3) == CostBreakdown(1.0, 6.0, 7.0)


def test_from_default_configuration() -> None:
    """Test default rates."""
    pricing = Pricing.from_configuration(PricingConfiguration())
    assert pricing.input_rate == 0.000003
    assert pricing.output_rate == 0.000015


def test_rounded() -> None:
    """Test that values are rounded to six decimal places for presentation."""
    cost = CostBreakdown(
        input_cost=0.0000001234, output_cost=0.123456789, total_cost=0.1234569124
    )
    rounded = cost.rounded()
    assert rounded.input_cost == 0.0
    assert rounded.output_cost == 0.123457
    assert rounded.total_cost == 0.123457
    # the original value is kept
    assert cost.output_cost == 0.123456789
