"""Generative model served by Llama Stack."""

from typing import Any

from llama_stack_client import (
    APIConnectionError,
    APIError,
    APIStatusError,
    AsyncLlamaStackClient,  # type: ignore
)

import constants
from log import get_logger
from metering.model_backend import ModelBackend, ModelReply
from quota.errors import ServiceUnavailableError

logger = get_logger(__name__)


def content_as_str(content: Any) -> str:
    """Convert message content (plain text or list of parts) to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        text = getattr(part, "text", None)
        if text is None and isinstance(part, dict):
            text = part.get("text")
        if text:
            parts.append(text)
    return "".join(parts)


class LlamaStackModelBackend(ModelBackend):
    """Model backend using the OpenAI compatible chat completion API of Llama Stack."""

    def __init__(
        self,
        client: AsyncLlamaStackClient,
        model_id: str,
        max_tokens: int = constants.DEFAULT_MAX_TOKENS,
    ) -> None:
        """Initialize backend with Llama Stack client and model to be used."""
        self.client = client
        self._model_id = model_id
        self.max_tokens = max_tokens

    @property
    def model_id(self) -> str:
        """Identifier of the model in form provider/model."""
        return self._model_id

    async def generate(self, prompt: str) -> ModelReply:
        """Send the prompt as a single user message and read the reported usage."""
        logger.debug("Calling model %s", self._model_id)
        try:
            response = await self.client.chat.completions.create(
                model=self._model_id,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
            )
        # connection to Llama Stack server, including timeouts
        except APIConnectionError as e:
            logger.error("Unable to connect to Llama Stack: %s", e)
            raise ServiceUnavailableError(
                f"Unable to connect to Llama Stack: {e}"
            ) from e
        except APIStatusError as e:
            logger.error("Llama Stack returned status %d: %s", e.status_code, e)
            raise ServiceUnavailableError(
                f"Model {self._model_id} is temporarily unavailable"
            ) from e
        # malformed responses and provider errors raised in library mode
        except APIError as e:
            logger.error("Llama Stack call to model %s failed: %s", self._model_id, e)
            raise ServiceUnavailableError(
                f"Model {self._model_id} call failed: {e.message}"
            ) from e

        if not response.choices:
            raise ServiceUnavailableError(f"Model {self._model_id} returned no choices")

        text = content_as_str(response.choices[0].message.content)

        # missing usage is reported as zero consumption
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", None) or 0
        output_tokens = getattr(usage, "completion_tokens", None) or 0

        try:
            return ModelReply(
                text=text, input_tokens=input_tokens, output_tokens=output_tokens
            )
        except ValueError as e:
            logger.error("Model %s reported invalid usage: %s", self._model_id, e)
            raise ServiceUnavailableError(str(e)) from e
