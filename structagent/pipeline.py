"""
Planner/executor pipeline.

A planner agent turns the user's task into a short list of human-readable
actions. A Bash specialist agent turns task and actions into an ordered list
of commands. The commands then run one by one on this machine, each one only
after the user confirmed it.

LLMs are prone to hallucinations and may make silly mistakes. Always review
the commands before confirming them.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Any, Awaitable, Callable, Iterable

from . import system
from .agents import CompletionResult, StructuredAgent, create_agent
from .config import Settings
from .console import CLIColors
from .errors import ParseError
from .llm import Usage
from .schema import array, boolean, obj, string
from .shell import ShellCommand, contains_pipeline

Ask = Callable[[str], Awaitable[str]]
Execute = Callable[[str], Awaitable[str]]

PLANNER_SYSTEM_PROMPT = (
    "You are a planner who works for an organization that requires utmost care and attention. "
    "Your job is to take human input and produce an overview of human-readable (non-code) actions "
    "that allows the IT expert to complete the task. Only answer in JSON."
)

SPECIALIST_SYSTEM_PROMPT = (
    "You are a Bash expert who works for an organization that requires utmost care and attention. "
    "Only answer in JSON."
)

PLANNER_SCHEMA = obj({
    "actions": array(
        string(),
        "A list of vague actions that must be taken to complete the task. Avoid being too specific. "
        "The actions should be human-readable and easy to understand. Avoid writing code.",
    ),
})

# `plan` and `reason` only let the model think out loud before answering.
SPECIALIST_SCHEMA = obj({
    "plan": string("A plan for which set of Bash commands you can run to complete the task."),
    "commands": array(
        obj({
            "reason": string("The reasoning behind why the command should be run."),
            "command": string(
                "The command to run. A single program invocation, never a pipeline. No free-form text."
            ),
            "pipe_to_next": boolean("Whether the command should be piped to the next command."),
        }),
        "A list of commands to run to complete the task. "
        "The commands should be piped to the next command if the `pipe_to_next` field is true.",
    ),
})


class PlanStep(BaseModel):
    reason: str = Field(..., description="Why the command should be run.")
    command: str = Field(..., min_length=1, description="Program invocation without any pipe.")
    pipe_to_next: bool = Field(False, description="Feed this command's output into the next one.")

    @field_validator("command")
    @classmethod
    def _single_invocation(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("command must not be empty")
        if contains_pipeline(v):
            raise ValueError(f"command must not contain a pipeline: {v!r}")
        return v


@dataclass
class ExecutionState:
    output: str = ""
    pipe_next: bool = False


def planner_prompt(task: str) -> str:
    return (
        "Ensure a minimal number of actions is used to complete the task. "
        "Remember that the task is completed by a computer expert, so avoid being too specific. "
        f"{task}"
    )


def specialist_prompt(task: str, actions: Iterable[str]) -> str:
    joined = "\n".join(actions)
    return f'''
A user has asked for the following:
"""
{task}
"""

Internal IT thinks this is the way to complete the task:
"""
{joined}
"""

Please produce a list of Bash commands that can be used to complete the task. Ensure a minimal number of actions is used to complete the task.
'''


class PlannerExecutorPipeline:
    def __init__(
        self,
        planner: StructuredAgent,
        specialist: StructuredAgent,
        ask: Ask = system.input,
        execute: Execute = system.execute,
        cost_per_1m_tokens: float = 0.0,
    ):
        self.planner = planner
        self.specialist = specialist
        self.ask = ask
        self.execute = execute
        self.cost_per_1m_tokens = cost_per_1m_tokens

    @classmethod
    def from_settings(cls, client: Any, settings: Settings, **kwargs: Any) -> "PlannerExecutorPipeline":
        planner = create_agent(client, PLANNER_SYSTEM_PROMPT, PLANNER_SCHEMA, settings.model)
        specialist = create_agent(client, SPECIALIST_SYSTEM_PROMPT, SPECIALIST_SCHEMA, settings.model)
        if "execute" not in kwargs:
            shell = settings.shell

            async def execute(command: str) -> str:
                return await system.execute(command, shell=shell)

            kwargs["execute"] = execute
        return cls(planner, specialist, cost_per_1m_tokens=settings.cost_per_1m_tokens, **kwargs)

    async def get_plan(self) -> list[PlanStep]:
        task = await self.ask("Hi! What do you need me to do for you today?")

        planned = await self.planner.run(planner_prompt(task))
        self._report_usage(planned.usage)
        actions = planned.result.get("actions") or []
        if not actions:
            raise ParseError("planner returned no actions")
        print(CLIColors.highlight("\n📋 Actions:"))
        for i, action in enumerate(actions, 1):
            print(f"  {i}. {action}")

        specialised = await self.specialist.run(specialist_prompt(task, actions))
        self._report_usage(specialised.usage)
        steps = self._to_steps(specialised)
        print(CLIColors.highlight("\n💻 Commands:"))
        for i, step in enumerate(steps, 1):
            pipe = " |" if step.pipe_to_next else ""
            print(f"  {i}. {step.command}{pipe}")
        return steps

    async def run_plan(self, steps: Iterable[PlanStep]) -> str:
        state = ExecutionState()
        for step in steps:
            command = ShellCommand(step.command, upstream=state.output if state.pipe_next else None)
            command_string = command.render()

            print(CLIColors.info(
                f"\n\n💻  The Bash nerd wants to run the following command: '{command_string}'"
                f"\n\nReasoning: {step.reason}"
            ))
            await self.ask(
                "Press ENTER to execute the command ⚠️  ON YOUR COMPUTER ⚠️  or CTRL+C to reject it..."
            )
            state.output = await self.execute(command_string)
            print(state.output)

            state.pipe_next = step.pipe_to_next
        return state.output

    async def run(self) -> str:
        steps = await self.get_plan()
        return await self.run_plan(steps)

    def _to_steps(self, specialised: CompletionResult) -> list[PlanStep]:
        try:
            return [PlanStep.model_validate(c) for c in specialised.result.get("commands", [])]
        except ValidationError as e:
            raise ParseError(f"specialist returned an invalid command: {e}") from e

    def _report_usage(self, usage: Usage) -> None:
        try:
            cost = usage.cost(self.cost_per_1m_tokens)
            print(CLIColors.info(f"\n\n💰  Consumed {usage.total_tokens} tokens (${cost:.4f})"))
        except Exception as e:
            logging.warning(f"could not report token usage: {e}")
