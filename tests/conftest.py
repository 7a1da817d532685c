"""Shared test fixtures: fake completion clients and scripted console/shell."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


def make_completion(content, usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=usage,
    )


def make_usage(prompt=0, completion=0, total=None):
    return SimpleNamespace(
        prompt_tokens=prompt,
        completion_tokens=completion,
        total_tokens=prompt + completion if total is None else total,
    )


def make_client(*contents, usage=None):
    """Fake AsyncOpenAI client answering each call with the next content."""
    responses = [
        make_completion(c if isinstance(c, str) else json.dumps(c), usage)
        for c in contents
    ]
    create = AsyncMock(side_effect=responses)
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


class ScriptedConsole:
    """Records every prompt and every command in one shared event log."""

    def __init__(self, answers=None, outputs=None, fail_on=None):
        self.answers = list(answers or [])
        self.outputs = dict(outputs or {})
        self.fail_on = fail_on
        self.events = []

    async def ask(self, prompt):
        self.events.append(("ask", prompt))
        return self.answers.pop(0) if self.answers else ""

    async def execute(self, command):
        self.events.append(("execute", command))
        if self.fail_on is not None and self.fail_on in command:
            from structagent.errors import ExecutionError
            raise ExecutionError(command, 1, "", "boom")
        return self.outputs.get(command, f"out:{command}\n")

    @property
    def executed(self):
        return [e[1] for e in self.events if e[0] == "execute"]

    @property
    def prompts(self):
        return [e[1] for e in self.events if e[0] == "ask"]


@pytest.fixture
def console():
    return ScriptedConsole()
