"""Models for REST API requests."""

from pydantic import BaseModel, Field, field_validator

from log import get_logger

logger = get_logger(__name__)


class CreateAccountRequest(BaseModel):
    """Model representing a request to create new account.

    Attributes:
        user_id: The identifier of the account owner.
        token_limit: Maximum number of tokens the user may consume.

    Example:
        ```python
        request = CreateAccountRequest(user_id="u1", token_limit=1000)
        ```
    """

    user_id: str = Field(
        description="The identifier of the account owner",
        min_length=1,
        strict=True,
        examples=["u1", "6d9a3c5e-4b7f-4f0e-9a7b-1c2d3e4f5a6b"],
    )

    token_limit: int = Field(
        description="Maximum number of tokens the user may consume",
        gt=0,
        strict=True,
        examples=[1000, 100000],
    )

    # provides examples for /docs endpoint
    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "u1",
                    "token_limit": 1000,
                },
            ]
        },
    }


class UpdateLimitRequest(BaseModel):
    """Model representing a request to change the token limit of an account.

    Attributes:
        new_limit: New maximum number of tokens.
    """

    new_limit: int = Field(
        description="New maximum number of tokens",
        gt=0,
        strict=True,
        examples=[5000],
    )

    # provides examples for /docs endpoint
    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "new_limit": 5000,
                },
            ]
        },
    }


class RecordUsageRequest(BaseModel):
    """Model representing consumption reported by a client directly.

    Attributes:
        tokens_consumed: Number of tokens to add to the usage.
        cost: Optional cost of the consumption.

    Example:
        ```python
        request = RecordUsageRequest(tokens_consumed=70)
        ```
    """

    tokens_consumed: int = Field(
        description="Number of tokens to add to the usage",
        ge=0,
        strict=True,
        examples=[70, 1500],
    )

    cost: float = Field(
        0.0,
        description="Cost of the consumption",
        ge=0.0,
        allow_inf_nan=False,
        examples=[0.0, 0.00045],
    )

    # provides examples for /docs endpoint
    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "tokens_consumed": 70,
                },
                {
                    "tokens_consumed": 70,
                    "cost": 0.00045,
                },
            ]
        },
    }


class InvokeModelRequest(BaseModel):
    """Model representing a prompt to be sent to the model on behalf of a user.

    Attributes:
        prompt: The prompt text.
    """

    prompt: str = Field(
        description="The prompt text",
        min_length=1,
        strict=True,
        examples=["Summarize the plot of Hamlet in one sentence."],
    )

    # provides examples for /docs endpoint
    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "prompt": "Summarize the plot of Hamlet in one sentence.",
                },
            ]
        },
    }

    @field_validator("prompt")
    @classmethod
    def check_prompt_not_blank(cls, value: str) -> str:
        """Reject prompt consisting of whitespace only."""
        if not value.strip():
            raise ValueError("Prompt must not be blank")
        return value
