from __future__ import annotations
from dataclasses import dataclass
import json
import logging
from typing import Any

from .config import AgentConfig
from .errors import ConfigurationError, ParseError
from .llm import Usage
from .schema import Schema, wire_schema


@dataclass(frozen=True)
class CompletionResult:
    result: Any
    usage: Usage


class StructuredAgent:
    """
    An agent that answers in a structured format.

    Every call to :meth:`run` sends one request asking for a JSON object that
    matches ``config.output_schema`` and returns the decoded object together
    with the token usage of that request. The agent keeps no state between
    calls.

        agent = create_agent(
            client,
            system_prompt="You are a helpful assistant.",
            schema=obj({"name": string()}),
            model=DEFAULTS["model"],
        )
        out = await agent.run("My name is Jane Doe. What is the name of the person you are talking to?")
        out.result  # {"name": "Jane Doe"}
    """

    def __init__(self, client: Any, config: AgentConfig):
        if config.output_schema is None:
            raise ConfigurationError("Schema is required")
        self.client = client
        self.config = config
        self._wire_schema = wire_schema(config.output_schema)

    async def run(self, prompt: str) -> CompletionResult:
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")

        completion = await self.client.chat.completions.create(
            model=self.config.model,
            response_format={"type": "json_object", "schema": self._wire_schema},
            messages=[
                {"role": "system", "content": self.config.system_prompt.strip()},
                {"role": "user", "content": prompt.strip()},
            ],
        )

        content = completion.choices[0].message.content
        try:
            result = json.loads(content)
        except (TypeError, json.JSONDecodeError) as e:
            raise ParseError(f"model returned invalid JSON: {e}", content=content) from e

        checked = self.config.output_schema.validate(result)
        if not checked.ok:
            raise ParseError(
                "model response does not match the schema: " + "; ".join(checked.errors),
                content=content,
            )

        usage = Usage.from_response(getattr(completion, "usage", None))
        logging.debug(f"{self.config.model}: {usage.total_tokens} tokens")
        return CompletionResult(result=checked.value, usage=usage)


def create_agent(client: Any, system_prompt: str, schema: Schema | None, model: str) -> StructuredAgent:
    return StructuredAgent(
        client,
        AgentConfig(model=model, system_prompt=system_prompt, output_schema=schema),
    )
