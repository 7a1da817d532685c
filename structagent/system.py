"""
Console and shell access.

Both helpers suspend the caller until the human or the process answers;
there is no timeout. Use CTRL+C to abort.
"""
from __future__ import annotations
import asyncio
import builtins
import logging
from pathlib import Path

from .config import DEFAULTS
from .errors import ExecutionError


async def input(prompt: str) -> str:
    """
    Ask the user a question and wait until they press enter.

        name = await system.input("What is your name?")
    """
    return await asyncio.to_thread(builtins.input, f"{prompt} ")


async def execute(command: str, shell: str = DEFAULTS["shell"], cwd: str | Path | None = None) -> str:
    proc = await asyncio.create_subprocess_exec(
        shell, "-c", command,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    raw_out, raw_err = await proc.communicate()
    stdout = raw_out.decode("utf-8", errors="replace")
    stderr = raw_err.decode("utf-8", errors="replace")

    if stderr.strip():
        logging.warning(f"stderr from `{command}`: {stderr.strip()}")
    if proc.returncode != 0:
        raise ExecutionError(command, proc.returncode, stdout, stderr)
    return stdout
