"""Unit tests for PricingConfiguration model."""

import pytest

from pydantic import ValidationError

import constants
from models.config import PricingConfiguration


def test_pricing_configuration_defaults() -> None:
    """Test the default rates."""
    cfg = PricingConfiguration()
    assert cfg.input_rate == constants.DEFAULT_INPUT_RATE
    assert cfg.output_rate == constants.DEFAULT_OUTPUT_RATE


def test_pricing_configuration_custom_rates() -> None:
    """Test the rates configured explicitly."""
    cfg = PricingConfiguration(input_rate=0.5, output_rate=0)
    assert cfg.input_rate == 0.5
    assert cfg.output_rate == 0


def test_pricing_configuration_negative_rate() -> None:
    """Test that negative rates are refused."""
    with pytest.raises(ValidationError, match="greater than or equal to 0"):
        PricingConfiguration(input_rate=-0.1)

    with pytest.raises(ValidationError, match="greater than or equal to 0"):
        PricingConfiguration(output_rate=-1)
