"""
Store the Together API key in the .env file.

Nothing is asked when the file already has a non-empty TOGETHER_API_KEY.
"""
from __future__ import annotations
from pathlib import Path
import re
from dotenv import set_key
from typing import Awaitable, Callable

from .config import DEFAULTS

API_KEY_VAR = "TOGETHER_API_KEY"
_API_KEY_LINE = re.compile(rf"^{API_KEY_VAR}=.+$", re.MULTILINE)


def has_api_key(env_file: str | Path = DEFAULTS["env_file"]) -> bool:
    path = Path(env_file)
    if not path.exists():
        return False
    return bool(_API_KEY_LINE.search(path.read_text(encoding="utf-8")))


async def ensure_api_key(ask: Callable[[str], Awaitable[str]], env_file: str | Path = DEFAULTS["env_file"]) -> bool:
    """Prompt for the key and save it. Returns False when one was already set."""
    if has_api_key(env_file):
        return False
    api_key = ""
    while not api_key:
        api_key = (await ask("\n\n 🖥️  Please enter your Together API key:")).strip()
    path = Path(env_file)
    path.touch(exist_ok=True)
    set_key(str(path), API_KEY_VAR, api_key, quote_mode="never")
    return True
