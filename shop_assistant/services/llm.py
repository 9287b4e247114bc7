from abc import ABC, abstractmethod

import anthropic

from shop_assistant.exceptions import GatewayError
from shop_assistant.models.schemas import Completion, GenerationOptions, TokenUsage


class LLMGateway(ABC):
    """Stateless request/response boundary to a chat completion provider."""

    @abstractmethod
    async def complete(self, messages: list[dict[str, str]], options: GenerationOptions) -> Completion:
        """Return the completion or raise GatewayError."""

    async def close(self):
        pass


class AnthropicGateway(LLMGateway):
    def __init__(self, api_key: str, model: str, timeout: float = 30.0):
        self.model = model
        self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    # -- Low-level helpers --

    @staticmethod
    def _split_system(messages: list[dict[str, str]]) -> tuple[str, list[dict[str, str]]]:
        """The Messages API takes system text as a separate parameter."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] in ("user", "assistant")
        ]
        return "\n\n".join(system_parts), chat

    # -- Completion --

    async def complete(self, messages: list[dict[str, str]], options: GenerationOptions) -> Completion:
        """Send the conversation to Claude. Raises GatewayError on any provider failure."""
        system, chat = self._split_system(messages)
        try:
            response = await self._client.messages.create(
                model=self.model,
                system=system or anthropic.NOT_GIVEN,
                messages=chat,
                temperature=options.temperature,
                max_tokens=options.max_output_tokens,
            )
        except anthropic.APIError as e:
            raise GatewayError(f"Anthropic API error: {e}") from e

        return Completion(
            text_fragments=[block.text for block in response.content if block.type == "text"],
            finish_reason=response.stop_reason,
            usage=TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            ),
        )

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.close()
