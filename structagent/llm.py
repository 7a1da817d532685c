from __future__ import annotations
from dataclasses import dataclass
import logging
from openai import AsyncOpenAI
from typing import Any

from .config import Settings

Message = dict[str, str]


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_response(cls, usage: Any) -> "Usage":
        """Build a usage record, substituting zeros when the service sent none."""
        if usage is None:
            return cls()

        def count(name: str) -> int:
            raw = usage.get(name) if isinstance(usage, dict) else getattr(usage, name, None)
            try:
                return max(int(raw or 0), 0)
            except (TypeError, ValueError):
                return 0

        return cls(
            prompt_tokens=count("prompt_tokens"),
            completion_tokens=count("completion_tokens"),
            total_tokens=count("total_tokens"),
        )

    def cost(self, cost_per_1m_tokens: float) -> float:
        return self.total_tokens * cost_per_1m_tokens / 1_000_000


def create_client(settings: Settings) -> AsyncOpenAI:
    """
    OpenAI-compatible async client for the completion service.
    The bearer key comes from the environment, never from the agents.
    """
    return AsyncOpenAI(api_key=settings.require_api_key(), base_url=settings.base_url)


class LLM:
    """
    Plain chat-completion calls for the reviewer and the chat loop.
    Uses the OpenAI-compatible API format; errors are logged and re-raised.
    """
    def __init__(self, client: AsyncOpenAI):
        self.client = client

    async def complete(self, model: str, messages: list[Message], **kwargs: Any) -> Any:
        try:
            return await self.client.chat.completions.create(model=model, messages=messages, **kwargs)
        except Exception as e:
            logging.error(f"Completion API error ({model}): {e}")
            raise

    async def generate_text(self, prompt: str, model: str, system_prompt: str = "You are a helpful AI assistant.") -> str:
        response = await self.complete(
            model,
            [
                {"role": "system", "content": system_prompt.strip()},
                {"role": "user", "content": prompt.strip()},
            ],
        )
        return (response.choices[0].message.content or "").strip()
