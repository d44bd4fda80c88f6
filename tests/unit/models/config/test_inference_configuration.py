"""Unit tests for InferenceConfiguration model."""

import pytest

from pydantic import ValidationError

import constants
from models.config import InferenceConfiguration


def test_inference_constructor() -> None:
    """Test the InferenceConfiguration constructor with valid parameters."""
    inference_config = InferenceConfiguration()
    assert inference_config.default_provider is None
    assert inference_config.default_model is None
    assert inference_config.max_tokens == constants.DEFAULT_MAX_TOKENS
    assert inference_config.model_id is None

    inference_config = InferenceConfiguration(
        default_provider="openai",
        default_model="gpt-4o-mini",
        max_tokens=256,
    )
    assert inference_config.default_provider == "openai"
    assert inference_config.default_model == "gpt-4o-mini"
    assert inference_config.max_tokens == 256
    assert inference_config.model_id == "openai/gpt-4o-mini"


def test_inference_default_model_missing() -> None:
    """Test case where only default provider is set, should fail."""
    with pytest.raises(
        ValueError,
        match="Default model must be specified when default provider is set",
    ):
        InferenceConfiguration(default_provider="openai")


def test_inference_default_provider_missing() -> None:
    """Test case where only default model is set, should fail."""
    with pytest.raises(
        ValueError,
        match="Default provider must be specified when default model is set",
    ):
        InferenceConfiguration(default_model="gpt-4o-mini")


def test_inference_max_tokens_must_be_positive() -> None:
    """Test that zero max_tokens is refused."""
    with pytest.raises(ValidationError, match="Input should be greater than 0"):
        InferenceConfiguration(max_tokens=0)
