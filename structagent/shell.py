from __future__ import annotations
from dataclasses import dataclass
import shlex
from typing import Optional


def quote(payload: str) -> str:
    """Single-quote ``payload`` for the shell, escaping every embedded quote."""
    return "'" + payload.replace("'", "'\\''") + "'"


def contains_pipeline(invocation: str) -> bool:
    lexer = shlex.shlex(invocation, posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    try:
        return any(tok in ("|", "||", "|&") for tok in lexer)
    except ValueError:
        # unbalanced quotes: fall back to a plain scan
        return "|" in invocation


@dataclass(frozen=True)
class ShellCommand:
    invocation: str
    upstream: Optional[str] = None

    def render(self) -> str:
        if self.upstream is None:
            return self.invocation
        return f"printf '%s' {quote(self.upstream)} | {self.invocation}"
