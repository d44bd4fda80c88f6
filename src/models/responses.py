"""Models for REST API responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from metering.invocation import InvocationResult
from metering.pricing import CostBreakdown
from quota.account import Account
from quota.errors import OutcomeKind


class AccountResponse(BaseModel):
    """Model representing one account together with derived figures.

    Attributes:
        user_id: The identifier of the account owner.
        token_limit: Maximum number of tokens the user may consume.
        token_usage: Tokens consumed since the account was created.
        remaining_tokens: Tokens left to spend, never negative.
        total_cost: Cumulative cost of the consumed tokens.
        percentage_used: Share of the limit already consumed.
        last_updated: Time of the most recent change.
    """

    user_id: str = Field(
        description="The identifier of the account owner",
        examples=["u1"],
    )
    token_limit: int = Field(
        description="Maximum number of tokens the user may consume",
        examples=[1000],
    )
    token_usage: int = Field(
        description="Tokens consumed since the account was created",
        examples=[70],
    )
    remaining_tokens: int = Field(
        description="Tokens left to spend, zero when the limit was overrun",
        examples=[930],
    )
    total_cost: float = Field(
        description="Cumulative cost of the consumed tokens",
        examples=[0.00045],
    )
    percentage_used: float = Field(
        description="Share of the limit already consumed, in percents",
        examples=[7.0],
    )
    last_updated: datetime = Field(
        description="Time of the most recent change",
        examples=["2025-09-01T12:00:00Z"],
    )

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        """Construct response from account snapshot."""
        return cls(
            user_id=account.user_id,
            token_limit=account.token_limit,
            token_usage=account.token_usage,
            remaining_tokens=account.displayed_remaining_tokens,
            total_cost=account.total_cost,
            percentage_used=account.percentage_used,
            last_updated=account.last_updated,
        )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "u1",
                    "token_limit": 1000,
                    "token_usage": 70,
                    "remaining_tokens": 930,
                    "total_cost": 0.00045,
                    "percentage_used": 7.0,
                    "last_updated": "2025-09-01T12:00:00Z",
                }
            ]
        }
    }


class AccountListResponse(BaseModel):
    """Model representing a response to list accounts request."""

    accounts: list[AccountResponse] = Field(
        ...,
        description="List of all accounts",
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "accounts": [
                        {
                            "user_id": "u1",
                            "token_limit": 1000,
                            "token_usage": 70,
                            "remaining_tokens": 930,
                            "total_cost": 0.00045,
                            "percentage_used": 7.0,
                            "last_updated": "2025-09-01T12:00:00Z",
                        },
                        {
                            "user_id": "u2",
                            "token_limit": 500,
                            "token_usage": 0,
                            "remaining_tokens": 500,
                            "total_cost": 0.0,
                            "percentage_used": 0.0,
                            "last_updated": "2025-09-01T12:30:00Z",
                        },
                    ]
                }
            ]
        }
    }


class AccountCreatedResponse(BaseModel):
    """Model representing a response to create account request.

    Example:
        ```python
        created = AccountCreatedResponse(
            response="Account created",
            account=AccountResponse.from_account(account),
        )
        ```
    """

    response: str = Field(
        ...,
        description="Human readable result",
        examples=["Account u1 created"],
    )
    account: AccountResponse = Field(
        ...,
        description="The created account",
    )


class AccountUpdatedResponse(BaseModel):
    """Model representing a response to update limit request."""

    response: str = Field(
        ...,
        description="Human readable result",
        examples=["Token limit of account u1 updated"],
    )
    account: AccountResponse = Field(
        ...,
        description="The updated account",
    )


class UsageRecordedResponse(BaseModel):
    """Model representing a response to record usage request.

    Attributes:
        user_id: The identifier of the account owner.
        token_usage: Tokens consumed after the usage was recorded.
        remaining_tokens: Tokens left to spend, never negative.
        total_cost: Cumulative cost after the usage was recorded.
    """

    user_id: str = Field(
        description="The identifier of the account owner",
        examples=["u1"],
    )
    token_usage: int = Field(
        description="Tokens consumed after the usage was recorded",
        examples=[70],
    )
    remaining_tokens: int = Field(
        description="Tokens left to spend, zero when the limit was overrun",
        examples=[930],
    )
    total_cost: float = Field(
        description="Cumulative cost after the usage was recorded",
        examples=[0.0],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "u1",
                    "token_usage": 70,
                    "remaining_tokens": 930,
                    "total_cost": 0.0,
                }
            ]
        }
    }


class CostResponse(BaseModel):
    """Cost of one invocation split by direction."""

    input_cost: float = Field(description="Cost of the prompt", examples=[0.00015])
    output_cost: float = Field(description="Cost of the answer", examples=[0.0003])
    total_cost: float = Field(description="Cost of the invocation", examples=[0.00045])

    @classmethod
    def from_breakdown(cls, breakdown: CostBreakdown) -> "CostResponse":
        """Construct response from cost breakdown rounded for presentation."""
        rounded = breakdown.rounded()
        return cls(
            input_cost=rounded.input_cost,
            output_cost=rounded.output_cost,
            total_cost=rounded.total_cost,
        )


class InvokeModelResponse(BaseModel):
    """Model representing a response to metered model invocation.

    Attributes:
        user_id: The identifier of the account owner.
        response: Text generated by the model.
        tokens_consumed: Tokens debited from the account.
        input_tokens: Tokens sent to the model.
        output_tokens: Tokens generated by the model.
        remaining_tokens: Tokens left to spend, never negative.
        cost: Cost of this invocation.
    """

    user_id: str = Field(
        description="The identifier of the account owner",
        examples=["u1"],
    )
    response: str = Field(
        description="Text generated by the model",
        examples=["Prince Hamlet avenges his father and dies doing so."],
    )
    tokens_consumed: int = Field(
        description="Tokens debited from the account",
        examples=[70],
    )
    input_tokens: int = Field(
        description="Tokens sent to the model",
        examples=[50],
    )
    output_tokens: int = Field(
        description="Tokens generated by the model",
        examples=[20],
    )
    remaining_tokens: int = Field(
        description="Tokens left to spend, zero when the limit was overrun",
        examples=[930],
    )
    cost: CostResponse = Field(
        description="Cost of this invocation",
    )

    @classmethod
    def from_result(cls, user_id: str, result: InvocationResult) -> "InvokeModelResponse":
        """Construct response from outcome of metered invocation."""
        return cls(
            user_id=user_id,
            response=result.response,
            tokens_consumed=result.tokens_consumed,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            remaining_tokens=result.remaining_tokens,
            cost=CostResponse.from_breakdown(result.cost),
        )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "u1",
                    "response": "Prince Hamlet avenges his father and dies doing so.",
                    "tokens_consumed": 70,
                    "input_tokens": 50,
                    "output_tokens": 20,
                    "remaining_tokens": 930,
                    "cost": {
                        "input_cost": 0.00015,
                        "output_cost": 0.0003,
                        "total_cost": 0.00045,
                    },
                }
            ]
        }
    }


class AccountDeleteResponse(BaseModel):
    """Model representing a response to delete account request.

    Deleting an account that does not exist is reported as success too.
    """

    user_id: str = Field(
        description="The identifier of the deleted account",
        examples=["u1"],
    )
    response: str = Field(
        description="Human readable result",
        examples=["Account u1 deleted"],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "u1",
                    "response": "Account u1 deleted",
                }
            ]
        }
    }


class InfoResponse(BaseModel):
    """Model representing a response to an info request.

    Attributes:
        name: Service name.
        service_version: Service version.

    Example:
        ```python
        info_response = InfoResponse(
            name="Token Usage Tracker",
            service_version="0.1.0",
        )
        ```
    """

    name: str = Field(
        description="Service name",
        examples=["Token Usage Tracker"],
    )

    service_version: str = Field(
        description="Service version",
        examples=["0.1.0", "0.2.0", "1.0.0"],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Token Usage Tracker",
                    "service_version": "0.1.0",
                }
            ]
        }
    }


class ReadinessResponse(BaseModel):
    """Model representing response to a readiness request.

    Attributes:
        ready: If service is ready.
        reason: The reason for the readiness.
    """

    ready: bool = Field(
        ...,
        description="Flag indicating if service is ready",
        examples=[True, False],
    )

    reason: str = Field(
        ...,
        description="The reason for the readiness",
        examples=["Service is ready", "Database is not initialized"],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ready": True,
                    "reason": "Service is ready",
                }
            ]
        }
    }


class LivenessResponse(BaseModel):
    """Model representing a response to a liveness request.

    Attributes:
        alive: If app is alive.

    Example:
        ```python
        liveness_response = LivenessResponse(alive=True)
        ```
    """

    alive: bool = Field(
        ...,
        description="Flag indicating that the app is alive",
        examples=[True, False],
    )

    # provides examples for /docs endpoint
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "alive": True,
                }
            ]
        }
    }


class DetailModel(BaseModel):
    """Nested detail model for error responses."""

    kind: OutcomeKind = Field(..., description="Machine readable kind of the error")
    response: str = Field(..., description="Short summary of the error")
    cause: str = Field(..., description="Detailed explanation of what caused the error")


class AbstractErrorResponse(BaseModel):
    """Base class for all error responses.

    Contains a nested `detail` field.
    """

    detail: DetailModel

    def dump_detail(self) -> dict:
        """Return dict in FastAPI HTTPException format."""
        return self.detail.model_dump(mode="json")


class InvalidInputResponse(AbstractErrorResponse):
    """400 Bad Request - Request field is missing, has wrong type or is out of range."""

    def __init__(self, cause: str):
        """Initialize an InvalidInputResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.INVALID_INPUT, response="Invalid request", cause=cause
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "InvalidInput",
                        "response": "Invalid request",
                        "cause": "token_limit: Input should be greater than 0",
                    }
                }
            ]
        }
    }


class NotFoundResponse(AbstractErrorResponse):
    """404 Not Found - Account does not exist."""

    def __init__(self, cause: str):
        """Initialize a NotFoundResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.NOT_FOUND, response="Account not found", cause=cause
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "NotFound",
                        "response": "Account not found",
                        "cause": "Account u1 not found",
                    }
                },
                {
                    "detail": {
                        "kind": "NotFound",
                        "response": "Account not found",
                        "cause": "Account u1 not found, 70 consumed tokens could not be recorded",  # pylint: disable=line-too-long
                    }
                },
            ]
        }
    }


class AlreadyExistsResponse(AbstractErrorResponse):
    """409 Conflict - Account with the same identifier exists."""

    def __init__(self, cause: str):
        """Initialize an AlreadyExistsResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.ALREADY_EXISTS,
                response="Account already exists",
                cause=cause,
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "AlreadyExists",
                        "response": "Account already exists",
                        "cause": "Account u1 already exists",
                    }
                }
            ]
        }
    }


class QuotaExceededResponse(AbstractErrorResponse):
    """429 Too Many Requests - No tokens left to spend."""

    def __init__(self, cause: str):
        """Initialize a QuotaExceededResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.QUOTA_EXCEEDED,
                response="The quota has been exceeded",
                cause=cause,
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "QuotaExceeded",
                        "response": "The quota has been exceeded",
                        "cause": "User u1 has no available tokens",
                    }
                },
                {
                    "detail": {
                        "kind": "QuotaExceeded",
                        "response": "The quota has been exceeded",
                        "cause": "User u1 has 40 tokens over the limit",
                    }
                },
            ]
        }
    }


class StorageFailureResponse(AbstractErrorResponse):
    """500 Internal Server Error - Account storage could not complete the operation."""

    def __init__(self, cause: str):
        """Initialize a StorageFailureResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.STORAGE_FAILURE,
                response="Error communicating with account database",
                cause=cause,
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "StorageFailure",
                        "response": "Error communicating with account database",
                        "cause": "Failed to increment token usage for user u1: database is locked",  # pylint: disable=line-too-long
                    }
                }
            ]
        }
    }


class ServiceUnavailableResponse(AbstractErrorResponse):
    """503 Backend Unavailable - Unable to call the model."""

    def __init__(self, cause: str):
        """Initialize a ServiceUnavailableResponse."""
        super().__init__(
            detail=DetailModel(
                kind=OutcomeKind.SERVICE_UNAVAILABLE,
                response="Unable to call the model",
                cause=cause,
            )
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "detail": {
                        "kind": "ServiceUnavailable",
                        "response": "Unable to call the model",
                        "cause": "Unable to connect to Llama Stack: Connection error.",
                    }
                }
            ]
        }
    }
