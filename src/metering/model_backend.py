"""Abstract class that is the parent for all generative model backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ModelReply:
    """Model output together with the consumption it reported.

    Attributes:
        text: generated response
        input_tokens: number of tokens sent to the model
        output_tokens: number of tokens generated by the model
    """

    text: str
    input_tokens: int
    output_tokens: int

    def __post_init__(self) -> None:
        """Reject consumption reports that would decrease usage."""
        if self.input_tokens < 0 or self.output_tokens < 0:
            raise ValueError(
                f"Invalid token counts reported by model: "
                f"input {self.input_tokens}, output {self.output_tokens}"
            )

    @property
    def total_tokens(self) -> int:
        """Return all consumed tokens."""
        return self.input_tokens + self.output_tokens


class ModelBackend(ABC):
    """Generative model called by the metered invocation adapter."""

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Identifier of the model, used in logs and metrics."""

    @abstractmethod
    async def generate(self, prompt: str) -> ModelReply:
        """Generate response to the prompt.

        Raises:
            ServiceUnavailableError: when the model can not be reached or fails.
        """
