"""
Multi-turn chat.

The conversation is an immutable value: every turn takes the history so far
and hands back a new one with the user message and the reply appended.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Literal

from .llm import LLM

Role = Literal["system", "user", "assistant"]
EXIT_WORDS = ("exit", "quit", "q")


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class Conversation:
    messages: tuple[ChatMessage, ...] = ()

    @classmethod
    def start(cls, system_prompt: str | None = None) -> "Conversation":
        if system_prompt:
            return cls((ChatMessage("system", system_prompt.strip()),))
        return cls()

    def with_message(self, role: Role, content: str) -> "Conversation":
        return Conversation(self.messages + (ChatMessage(role, content),))

    def as_messages(self) -> list[dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)


async def take_turn(llm: LLM, model: str, conversation: Conversation, text: str) -> tuple[str, Conversation]:
    asked = conversation.with_message("user", text.strip())
    response = await llm.complete(model, asked.as_messages())
    reply = (response.choices[0].message.content or "").strip()
    return reply, asked.with_message("assistant", reply)


async def chat_loop(
    llm: LLM,
    model: str,
    ask: Callable[[str], Awaitable[str]],
    system_prompt: str | None = None,
    exit_words: Iterable[str] = EXIT_WORDS,
    show: Callable[[str], None] = print,
) -> Conversation:
    """Read a line, answer it, repeat until the user types an exit word or sends EOF."""
    stop = {w.lower() for w in exit_words}
    conversation = Conversation.start(system_prompt)
    while True:
        try:
            text = (await ask("You:")).strip()
        except EOFError:
            break
        if text.lower() in stop:
            break
        if not text:
            continue
        reply, conversation = await take_turn(llm, model, conversation, text)
        show(reply)
    return conversation
